# SPDX-FileCopyrightText: Copyright (c) 2025 Liz Clark for Adafruit Industries
#
# SPDX-License-Identifier: MIT

import errno

import adafruit_logging as logging
import pytest

from circuitpython_ina219 import INA219, Transport


class FakeINA219(Transport):
    """Register level model of an INA219 that records every transfer."""

    def __init__(self, registers=None):
        self.registers = [0, 0, 0, 0, 0, 0]
        for register, value in (registers or {}).items():
            self.registers[register] = value
        self.pointer = 0
        self.transfers = []
        self.error = None
        self.short_read = False
        self.close_count = 0

    def write(self, data):
        data = bytes(data)
        self.transfers.append(("write", data))
        if self.error is not None:
            raise self.error
        self.pointer = data[0]
        if len(data) == 3:
            self.registers[self.pointer] = (data[1] << 8) | data[2]

    def read(self, count):
        self.transfers.append(("read", count))
        if self.error is not None:
            raise self.error
        data = self.registers[self.pointer].to_bytes(2, "big")[:count]
        if self.short_read:
            return data[:1]
        return data

    def close(self):
        self.close_count += 1


class FakeI2CBus:
    """Just enough of ``busio.I2C`` for ``I2CDevice``, with a chip at one address."""

    def __init__(self, address=0x40, registers=None):
        self.address = address
        self.chip = FakeINA219(registers)
        self.locked = False

    def try_lock(self):
        if self.locked:
            return False
        self.locked = True
        return True

    def unlock(self):
        self.locked = False

    def _check(self, address):
        if address != self.address:
            raise OSError(errno.EREMOTEIO, "Remote I/O error")

    def writeto(self, address, buffer, *, start=0, end=None):
        self._check(address)
        data = bytes(buffer[start:end])
        if data:
            self.chip.write(data)

    def readfrom_into(self, address, buffer, *, start=0, end=None):
        self._check(address)
        if end is None:
            end = len(buffer)
        buffer[start:end] = self.chip.read(end - start)


class RecordingHandler(logging.Handler):
    """Keeps every emitted record."""

    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)

    @property
    def messages(self):
        return [record.msg for record in self.records]


@pytest.fixture
def chip():
    return FakeINA219()


@pytest.fixture
def sensor(chip):
    return INA219(chip, current_divisor=2, power_divisor=3)


@pytest.fixture
def make_bus():
    return FakeI2CBus


@pytest.fixture
def io_error():
    return OSError(errno.EIO, "Input/output error")


@pytest.fixture
def log_handler():
    logger = logging.getLogger("circuitpython_ina219")
    handler = RecordingHandler()
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    yield handler
    logger.removeHandler(handler)
    logger.setLevel(logging.WARNING)

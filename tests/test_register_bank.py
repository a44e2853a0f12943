# SPDX-FileCopyrightText: Copyright (c) 2025 Liz Clark for Adafruit Industries
#
# SPDX-License-Identifier: MIT

import pytest

from circuitpython_ina219 import I2CTransport, RegisterBank, TransportError


def test_read_register_selects_address_then_reads_two_bytes(chip):
    chip.registers[2] = 0xFA02
    bank = RegisterBank(chip)

    assert bank.read_register(2) == 0xFA02
    assert chip.transfers == [("write", b"\x02"), ("read", 2)]


def test_write_register_sends_address_msb_lsb(chip):
    bank = RegisterBank(chip)

    bank.write_register(5, 0x1234)

    assert chip.transfers == [("write", b"\x05\x12\x34")]
    assert chip.registers[5] == 0x1234


@pytest.mark.parametrize("register", [1, 2, 3, 4])
def test_write_register_rejects_read_only_registers(chip, register):
    bank = RegisterBank(chip)

    with pytest.raises(ValueError):
        bank.write_register(register, 1)
    assert chip.transfers == []


def test_write_register_rejects_values_wider_than_16_bits(chip):
    with pytest.raises(ValueError):
        RegisterBank(chip).write_register(0, 0x10000)
    assert chip.transfers == []


def test_read_register_rejects_unknown_register(chip):
    with pytest.raises(ValueError):
        RegisterBank(chip).read_register(6)
    assert chip.transfers == []


def test_os_errors_become_transport_errors(chip, io_error):
    chip.error = io_error

    with pytest.raises(TransportError) as excinfo:
        RegisterBank(chip).read_register(0)
    assert excinfo.value.__cause__ is io_error


def test_transport_errors_propagate_unchanged(chip):
    error = TransportError("bus gone")
    chip.error = error

    with pytest.raises(TransportError) as excinfo:
        RegisterBank(chip).write_register(0, 0)
    assert excinfo.value is error


def test_short_read_is_a_transport_error(chip):
    chip.short_read = True

    with pytest.raises(TransportError):
        RegisterBank(chip).read_register(4)


def test_i2c_transport_reads_and_writes_through_the_bus(make_bus):
    bus = make_bus(address=0x41, registers={4: 0x1234})
    transport = I2CTransport(bus, 0x41)
    bank = RegisterBank(transport)

    assert bank.read_register(4) == 0x1234
    bank.write_register(5, 0xABCD)

    assert bus.chip.registers[5] == 0xABCD
    assert bus.chip.transfers == [
        ("write", b"\x04"),
        ("read", 2),
        ("write", b"\x05\xab\xcd"),
    ]
    assert not bus.locked


def test_i2c_transport_fails_without_device(make_bus):
    with pytest.raises(TransportError) as excinfo:
        I2CTransport(make_bus(address=0x41), 0x40)
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_i2c_transport_bus_errors_become_transport_errors(make_bus):
    bus = make_bus()
    transport = I2CTransport(bus, 0x40, probe=False)
    bus.address = 0x45

    with pytest.raises(TransportError):
        RegisterBank(transport).read_register(0)
    assert not bus.locked


def test_closed_i2c_transport_refuses_io(make_bus):
    transport = I2CTransport(make_bus())
    transport.close()

    with pytest.raises(TransportError):
        transport.read(2)
    with pytest.raises(TransportError):
        transport.write(b"\x00")

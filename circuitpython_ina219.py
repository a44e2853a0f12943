# SPDX-FileCopyrightText: Copyright (c) 2025 Liz Clark for Adafruit Industries
#
# SPDX-License-Identifier: MIT
"""
`circuitpython_ina219`
================================================================================

CircuitPython driver for the INA219 High Side DC Current Sensor


* Author(s): Liz Clark

Implementation Notes
--------------------

**Hardware:**

* `Adafruit INA219 High Side DC Current Sensor Breakout <https://www.adafruit.com/product/904>`_

**Software and Dependencies:**

* Adafruit CircuitPython firmware for the supported boards:
  https://circuitpython.org/downloads

* Adafruit's Bus Device library: https://github.com/adafruit/Adafruit_CircuitPython_BusDevice
* Adafruit's Register library: https://github.com/adafruit/Adafruit_CircuitPython_Register
* Adafruit's Logging library: https://github.com/adafruit/Adafruit_CircuitPython_Logging
"""

import adafruit_logging as logging
from adafruit_bus_device.i2c_device import I2CDevice
from adafruit_register.i2c_bit import ROBit, RWBit
from adafruit_register.i2c_bits import ROBits, RWBits
from adafruit_register.i2c_struct import ROUnaryStruct, UnaryStruct
from micropython import const

try:
    import typing  # pylint: disable=unused-import

    from busio import I2C
except ImportError:
    pass

__version__ = "0.0.0+auto.0"
__repo__ = "https://github.com/adafruit/Adafruit_CircuitPython_INA219.git"

logger = logging.getLogger("circuitpython_ina219")

# Register addresses
_REG_CONFIG = const(0x00)
_REG_SHUNTVOLTAGE = const(0x01)
_REG_BUSVOLTAGE = const(0x02)
_REG_POWER = const(0x03)
_REG_CURRENT = const(0x04)
_REG_CALIBRATION = const(0x05)

_REGISTERS = (
    _REG_CONFIG,
    _REG_SHUNTVOLTAGE,
    _REG_BUSVOLTAGE,
    _REG_POWER,
    _REG_CURRENT,
    _REG_CALIBRATION,
)
_WRITABLE_REGISTERS = (_REG_CONFIG, _REG_CALIBRATION)

# Constants
_INA219_DEFAULT_ADDR = const(0x40)
_REGISTER_WIDTH = const(2)
_MAX_REGISTER_VALUE = const(0xFFFF)


class TransportError(OSError):
    """A read or write on the underlying bus failed."""


class ValidationError(ValueError):
    """A value supplied to or read from the device is out of range."""


class ConfigurationError(ValueError):
    """The device was set up with missing or unknown settings."""


class Gain:
    """Shunt voltage PGA gain constants for INA219"""

    GAIN_1 = const(1)  # +/- 40mV
    GAIN_2 = const(2)  # +/- 80mV
    GAIN_4 = const(4)  # +/- 160mV
    GAIN_8 = const(8)  # +/- 320mV

    # Indexed by register code
    _CODES = (GAIN_1, GAIN_2, GAIN_4, GAIN_8)


class BusVoltageRange:
    """Bus voltage range constants for INA219"""

    RANGE_16V = const(16)
    RANGE_32V = const(32)

    _CODES = (RANGE_16V, RANGE_32V)


class ADCResolution:
    """ADC resolution and averaging settings as ``(samples, bits)`` pairs"""

    ADCRES_9BIT_1S = (1, 9)
    ADCRES_10BIT_1S = (1, 10)
    ADCRES_11BIT_1S = (1, 11)
    ADCRES_12BIT_1S = (1, 12)
    ADCRES_12BIT_2S = (2, 12)
    ADCRES_12BIT_4S = (4, 12)
    ADCRES_12BIT_8S = (8, 12)
    ADCRES_12BIT_16S = (16, 12)
    ADCRES_12BIT_32S = (32, 12)
    ADCRES_12BIT_64S = (64, 12)
    ADCRES_12BIT_128S = (128, 12)

    # Codes 4-7 read back the same as 0-3 and code 8 as 3, as listed in the datasheet
    _DECODE = (
        ADCRES_9BIT_1S,
        ADCRES_10BIT_1S,
        ADCRES_11BIT_1S,
        ADCRES_12BIT_1S,
        ADCRES_9BIT_1S,
        ADCRES_10BIT_1S,
        ADCRES_11BIT_1S,
        ADCRES_12BIT_1S,
        ADCRES_12BIT_1S,
        ADCRES_12BIT_2S,
        ADCRES_12BIT_4S,
        ADCRES_12BIT_8S,
        ADCRES_12BIT_16S,
        ADCRES_12BIT_32S,
        ADCRES_12BIT_64S,
        ADCRES_12BIT_128S,
    )

    _ENCODE = {
        ADCRES_9BIT_1S: 0,
        ADCRES_10BIT_1S: 1,
        ADCRES_11BIT_1S: 2,
        ADCRES_12BIT_1S: 3,
        ADCRES_12BIT_2S: 9,
        ADCRES_12BIT_4S: 10,
        ADCRES_12BIT_8S: 11,
        ADCRES_12BIT_16S: 12,
        ADCRES_12BIT_32S: 13,
        ADCRES_12BIT_64S: 14,
        ADCRES_12BIT_128S: 15,
    }


class Mode:
    """Operating mode constants for INA219"""

    POWER_DOWN = "power_down"
    SHUNT_VOLTAGE_TRIGGERED = "shunt_voltage_triggered"
    BUS_VOLTAGE_TRIGGERED = "bus_voltage_triggered"
    SHUNT_AND_BUS_VOLTAGE_TRIGGERED = "shunt_and_bus_voltage_triggered"
    ADC_OFF = "adc_off"
    SHUNT_VOLTAGE_CONTINUOUS = "shunt_voltage_continuous"
    BUS_VOLTAGE_CONTINUOUS = "bus_voltage_continuous"
    SHUNT_AND_BUS_VOLTAGE_CONTINUOUS = "shunt_and_bus_voltage_continuous"

    # Indexed by register code
    _CODES = (
        POWER_DOWN,
        SHUNT_VOLTAGE_TRIGGERED,
        BUS_VOLTAGE_TRIGGERED,
        SHUNT_AND_BUS_VOLTAGE_TRIGGERED,
        ADC_OFF,
        SHUNT_VOLTAGE_CONTINUOUS,
        BUS_VOLTAGE_CONTINUOUS,
        SHUNT_AND_BUS_VOLTAGE_CONTINUOUS,
    )


# Number of sign extension bits above the sign bit for each gain
_SHUNT_SIGN_EXTENSION = {
    Gain.GAIN_1: 3,
    Gain.GAIN_2: 2,
    Gain.GAIN_4: 1,
    Gain.GAIN_8: 0,
}


def _shunt_width(gain: int) -> int:
    if gain not in _SHUNT_SIGN_EXTENSION:
        raise ValidationError("invalid shunt voltage value")
    return 16 - _SHUNT_SIGN_EXTENSION[gain]


def decode_shunt_counts(raw: int, gain: int) -> int:
    """Decode a raw shunt voltage register value into signed 10uV steps.

    The register holds a sign bit followed by ``15 - n`` magnitude bits, where
    ``n`` extension bits above the sign bit depend on the PGA gain. The
    extension bits must repeat the sign bit, anything else is rejected.

    :param int raw: The unsigned 16 bit register value
    :param int gain: The PGA gain the value was converted with (1, 2, 4 or 8)
    """
    width = _shunt_width(gain)
    if not 0 <= raw <= _MAX_REGISTER_VALUE:
        raise ValidationError("invalid shunt voltage value")
    sign = (raw >> (width - 1)) & 1
    extension = raw >> width
    if extension != (sign * ((1 << (16 - width)) - 1)):
        raise ValidationError("invalid shunt voltage value")
    magnitude = raw & ((1 << width) - 1)
    if sign:
        return -((1 << width) - magnitude)
    return magnitude


def encode_shunt_counts(counts: int, gain: int) -> int:
    """Encode signed 10uV steps into the register layout used for ``gain``."""
    width = _shunt_width(gain)
    limit = 1 << (width - 1)
    if not -limit <= counts < limit:
        raise ValidationError(f"Shunt voltage counts {counts} out of range for gain {gain}")
    return counts & _MAX_REGISTER_VALUE


class Transport:
    """Byte level connection to a single device on the bus.

    Implementations raise :class:`OSError` (or :class:`TransportError`) when a
    transfer fails.
    """

    def read(self, count: int) -> bytes:
        """Read ``count`` bytes from the device."""
        raise NotImplementedError

    def write(self, data: bytes) -> None:
        """Write ``data`` to the device."""
        raise NotImplementedError

    def close(self) -> None:
        """Release the connection."""


class I2CTransport(Transport):
    """Transport over a ``busio.I2C`` compatible bus.

    :param ~busio.I2C i2c_bus: The I2C bus the INA219 is connected to.
    :param int address: The I2C device address. Defaults to :const:`0x40`
    :param bool probe: Check for the device on the bus when created. Defaults to True.
    """

    def __init__(
        self, i2c_bus: "I2C", address: int = _INA219_DEFAULT_ADDR, probe: bool = True
    ) -> None:
        self.address = address
        try:
            self.i2c_device = I2CDevice(i2c_bus, address, probe=probe)
        except ValueError as error:
            raise TransportError(f"No INA219 found at address 0x{address:02X}") from error

    def read(self, count: int) -> bytes:
        if self.i2c_device is None:
            raise TransportError("I2C transport is closed")
        buffer = bytearray(count)
        with self.i2c_device as i2c:
            i2c.readinto(buffer)
        return bytes(buffer)

    def write(self, data: bytes) -> None:
        if self.i2c_device is None:
            raise TransportError("I2C transport is closed")
        with self.i2c_device as i2c:
            i2c.write(data)

    def close(self) -> None:
        self.i2c_device = None


class RegisterBank:
    """Raw 16 bit register access over a :class:`Transport`.

    Also acts as the ``i2c_device`` the register descriptors talk to, so every
    descriptor access ends up as the same address-then-data transfers.
    """

    def __init__(self, transport: Transport) -> None:
        self.transport = transport

    def __enter__(self) -> "RegisterBank":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        return False

    def _write(self, data: bytes) -> None:
        try:
            self.transport.write(data)
        except TransportError:
            raise
        except OSError as error:
            raise TransportError(f"I2C write failed: {error}") from error

    def _read(self, count: int) -> bytes:
        try:
            data = self.transport.read(count)
        except TransportError:
            raise
        except OSError as error:
            raise TransportError(f"I2C read failed: {error}") from error
        if len(data) != count:
            raise TransportError(f"Expected {count} bytes from I2C read, got {len(data)}")
        return data

    def write(self, buf, *, start: int = 0, end: int = None) -> None:
        """Write ``buf[start:end]``. The first byte is the register address."""
        data = bytes(buf[start:end])
        if len(data) != 1 + _REGISTER_WIDTH or data[0] not in _WRITABLE_REGISTERS:
            raise ValueError(f"Register write must be 3 bytes to register 0 or 5, got {data!r}")
        self._write(data)

    def readinto(self, buf, *, start: int = 0, end: int = None) -> None:
        """Read into ``buf[start:end]`` from the selected register."""
        if end is None:
            end = len(buf)
        buf[start:end] = self._read(end - start)

    def write_then_readinto(
        self,
        out_buffer,
        in_buffer,
        *,
        out_start: int = 0,
        out_end: int = None,
        in_start: int = 0,
        in_end: int = None,
    ) -> None:
        """Select a register with ``out_buffer`` then read it into ``in_buffer``."""
        address = bytes(out_buffer[out_start:out_end])
        if len(address) != 1 or address[0] not in _REGISTERS:
            raise ValueError(f"Invalid register address {address!r}")
        self._write(address)
        self.readinto(in_buffer, start=in_start, end=in_end)

    def read_register(self, register: int) -> int:
        """Read a register as an unsigned 16 bit integer."""
        if register not in _REGISTERS:
            raise ValueError(f"Invalid register 0x{register:02X}")
        buffer = bytearray(_REGISTER_WIDTH)
        self._write(bytes([register]))
        self.readinto(buffer)
        return (buffer[0] << 8) | buffer[1]

    def write_register(self, register: int, value: int) -> None:
        """Write an unsigned 16 bit integer to the configuration or calibration register."""
        if register not in _WRITABLE_REGISTERS:
            raise ValueError(f"Register 0x{register:02X} is read only")
        if not 0 <= value <= _MAX_REGISTER_VALUE:
            raise ValueError(f"Register value {value} does not fit in 16 bits")
        self._write(bytes([register, value >> 8, value & 0xFF]))


class INA219:  # noqa: PLR0904
    """Driver for the INA219 current and power sensor.

    :param Transport transport: Connection to the device, owned by the driver
        from here on. See :class:`I2CTransport`.
    :param current_divisor: Raw current register counts per milliamp.
    :param power_divisor: Raw power register counts per milliwatt.
    :param str name: Label used in log messages.
    """

    # Configuration register bits
    _reset = RWBit(_REG_CONFIG, 15, register_width=2, lsb_first=False)
    _bus_voltage_range = RWBit(_REG_CONFIG, 13, register_width=2, lsb_first=False)
    _gain = RWBits(2, _REG_CONFIG, 11, register_width=2, lsb_first=False)
    _bus_adc = RWBits(4, _REG_CONFIG, 7, register_width=2, lsb_first=False)
    _shunt_adc = RWBits(4, _REG_CONFIG, 3, register_width=2, lsb_first=False)
    _mode = RWBits(3, _REG_CONFIG, 0, register_width=2, lsb_first=False)

    # Bus voltage register bits
    _raw_bus_voltage = ROBits(13, _REG_BUSVOLTAGE, 3, register_width=2, lsb_first=False)
    _conversion_ready = ROBit(_REG_BUSVOLTAGE, 1, register_width=2, lsb_first=False)
    _math_overflow = ROBit(_REG_BUSVOLTAGE, 0, register_width=2, lsb_first=False)

    # Measurement registers
    _raw_shunt_voltage = ROUnaryStruct(_REG_SHUNTVOLTAGE, ">H")
    _raw_power = ROUnaryStruct(_REG_POWER, ">H")
    _raw_current = ROUnaryStruct(_REG_CURRENT, ">H")

    # Calibration register
    _calibration = UnaryStruct(_REG_CALIBRATION, ">H")

    def __init__(
        self,
        transport: Transport,
        current_divisor: float = None,
        power_divisor: float = None,
        name: str = None,
    ) -> None:
        if transport is None:
            raise ConfigurationError("An INA219 needs a transport")
        if current_divisor is None:
            raise ConfigurationError("current_divisor is required")
        if power_divisor is None:
            raise ConfigurationError("power_divisor is required")
        self.i2c_device = RegisterBank(transport)
        self.name = name
        self._closed = False
        self._current_divisor = None
        self._power_divisor = None
        self.current_divisor = current_divisor
        self.power_divisor = power_divisor

    def __enter__(self) -> "INA219":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.deinit()

    def deinit(self) -> None:
        """Release the transport."""
        if self._closed:
            return
        logger.info(f"Disconnecting from INA219 sensor {self.name}")
        self.i2c_device.transport.close()
        self._closed = True

    @property
    def registers(self) -> RegisterBank:
        """Direct access to the raw registers."""
        return self.i2c_device

    def reset(self) -> None:
        """Reset the sensor to its power-on configuration."""
        self._reset = True

    @property
    def bus_voltage_range(self) -> int:
        """Full scale bus voltage range in volts, 16 or 32."""
        return BusVoltageRange._CODES[self._bus_voltage_range]

    @bus_voltage_range.setter
    def bus_voltage_range(self, value: int) -> None:
        if value not in BusVoltageRange._CODES:
            raise ValueError(f"Invalid bus voltage range {value}. Must be 16 or 32")
        self._bus_voltage_range = BusVoltageRange._CODES.index(value)

    @property
    def shunt_voltage_pga(self) -> int:
        """Shunt voltage PGA gain, one of the Gain.* constants.

        =====  ==========
        Gain   Range
        =====  ==========
        1      +/- 40mV
        2      +/- 80mV
        4      +/- 160mV
        8      +/- 320mV
        =====  ==========
        """
        return Gain._CODES[self._gain]

    @shunt_voltage_pga.setter
    def shunt_voltage_pga(self, value: int) -> None:
        if value not in Gain._CODES:
            raise ValueError(f"Invalid gain {value}. Must be one of the Gain.* constants")
        self._gain = Gain._CODES.index(value)

    @property
    def bus_adc_resolution_and_averaging(self) -> tuple:
        """Bus ADC setting as ``(samples, bits)``, one of the ADCResolution.* constants."""
        return ADCResolution._DECODE[self._bus_adc]

    @bus_adc_resolution_and_averaging.setter
    def bus_adc_resolution_and_averaging(self, value: tuple) -> None:
        self._bus_adc = self._adc_code(value)

    @property
    def shunt_adc_resolution_and_averaging(self) -> tuple:
        """Shunt ADC setting as ``(samples, bits)``, one of the ADCResolution.* constants."""
        return ADCResolution._DECODE[self._shunt_adc]

    @shunt_adc_resolution_and_averaging.setter
    def shunt_adc_resolution_and_averaging(self, value: tuple) -> None:
        self._shunt_adc = self._adc_code(value)

    @staticmethod
    def _adc_code(value: tuple) -> int:
        try:
            return ADCResolution._ENCODE[tuple(value)]
        except (KeyError, TypeError):
            raise ValueError(
                f"Invalid ADC resolution {value!r}. Must be one of the ADCResolution.* constants"
            ) from None

    @property
    def mode(self) -> str:
        """Operating mode of the sensor."""
        return Mode._CODES[self._mode]

    @mode.setter
    def mode(self, value: str) -> None:
        if value not in Mode._CODES:
            raise ValueError(f"Invalid mode {value!r}. Must be one of the Mode.* constants")
        self._mode = Mode._CODES.index(value)

    @property
    def calibration(self) -> int:
        """Raw calibration register value."""
        return self._calibration

    @calibration.setter
    def calibration(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"Calibration must be an integer, got {value!r}")
        if not 0 <= value <= _MAX_REGISTER_VALUE:
            raise ValidationError(f"Calibration {value} out of range 0-65535")
        self._calibration = value

    @property
    def current_divisor(self) -> float:
        """Raw current register counts per milliamp. Not stored on the chip."""
        return self._current_divisor

    @current_divisor.setter
    def current_divisor(self, value: float) -> None:
        self._current_divisor = self._check_divisor("current_divisor", value)

    @property
    def power_divisor(self) -> float:
        """Raw power register counts per milliwatt. Not stored on the chip."""
        return self._power_divisor

    @power_divisor.setter
    def power_divisor(self, value: float) -> None:
        self._power_divisor = self._check_divisor("power_divisor", value)

    @staticmethod
    def _check_divisor(label: str, value: float) -> float:
        if value is None or isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValidationError(f"{label} must be a number, got {value!r}")
        if value == 0:
            raise ValidationError(f"{label} must not be zero")
        return value

    @property
    def bus_voltage(self) -> float:
        """Bus voltage (between V- and GND) in volts."""
        # 4mV per LSB
        return self._raw_bus_voltage * 0.004

    @property
    def shunt_voltage(self) -> float:
        """Shunt voltage (between V+ and V-) in millivolts."""
        gain = self.shunt_voltage_pga
        # 10uV per LSB
        return decode_shunt_counts(self._raw_shunt_voltage, gain) / 100

    @property
    def current(self) -> float:
        """Current through the shunt resistor in milliamps."""
        return self._raw_current / self._current_divisor

    @property
    def power(self) -> float:
        """Power through the load in milliwatts."""
        return self._raw_power / self._power_divisor

    @property
    def conversion_ready(self) -> bool:
        """True when new samples are available since the last read.

        Reading clears the flag until the next conversion completes. A failed
        read is reported as not ready.
        """
        try:
            return bool(self._conversion_ready)
        except TransportError as error:
            logger.debug(f"Conversion ready check on {self.name} failed: {error}")
            return False

    @property
    def math_overflow(self) -> bool:
        """True when power or current calculations are out of range.

        A failed read is reported as no overflow.
        """
        try:
            return bool(self._math_overflow)
        except TransportError as error:
            logger.debug(f"Math overflow check on {self.name} failed: {error}")
            return False

    def _configure(self, calibration: int, bus_voltage_range: int, gain: int) -> None:
        self.calibration = calibration
        self.bus_voltage_range = bus_voltage_range
        self.shunt_voltage_pga = gain
        self.bus_adc_resolution_and_averaging = ADCResolution.ADCRES_12BIT_1S
        self.shunt_adc_resolution_and_averaging = ADCResolution.ADCRES_12BIT_1S
        self.mode = Mode.SHUNT_AND_BUS_VOLTAGE_CONTINUOUS

    def set_calibration_32V_2A(self) -> None:  # pylint: disable=invalid-name
        """Configures the INA219 to measure up to 32V and 2A of current,
        at the cost of accuracy. Use a ``current_divisor`` of 10 and a ``power_divisor`` of 2.

        .. note:: These values assume a 0.1 ohm shunt resistor is present
        """
        self._configure(4096, BusVoltageRange.RANGE_32V, Gain.GAIN_8)

    def set_calibration_32V_1A(self) -> None:  # pylint: disable=invalid-name
        """Configures the INA219 to measure up to 32V and 1A of current,
        at the cost of accuracy. Use a ``current_divisor`` of 25 and a ``power_divisor`` of 1.

        .. note:: These values assume a 0.1 ohm shunt resistor is present
        """
        self._configure(10240, BusVoltageRange.RANGE_32V, Gain.GAIN_8)

    def set_calibration_16V_400mA(self) -> None:  # pylint: disable=invalid-name
        """Configures the INA219 to measure up to 16V and 400mA of current
        at the highest resolution (0.1mA). Use a ``current_divisor`` of 20 and a
        ``power_divisor`` of 1.

        .. note:: These values assume a 0.1 ohm shunt resistor is present
        """
        self._configure(8192, BusVoltageRange.RANGE_16V, Gain.GAIN_1)

    _ACTIONS = {
        "reset": "reset",
        "set_calibration_32V_2A": "set_calibration_32V_2A",
        "set_calibration_32V_1A": "set_calibration_32V_1A",
        "set_calibration_16V_400mA": "set_calibration_16V_400mA",
        "calibrate_32V_2A": "set_calibration_32V_2A",
        "calibrate_32V_1A": "set_calibration_32V_1A",
        "calibrate_16V_400mA": "set_calibration_16V_400mA",
    }

    _SETTINGS = {
        "calibrate": "calibration",
        "calibration": "calibration",
        "bus_voltage_range": "bus_voltage_range",
        "shunt_voltage_pga": "shunt_voltage_pga",
        "bus_adc_resolution_and_averaging": "bus_adc_resolution_and_averaging",
        "shunt_adc_resolution_and_averaging": "shunt_adc_resolution_and_averaging",
        "mode": "mode",
        "current_divisor": "current_divisor",
        "power_divisor": "power_divisor",
    }

    def apply_commands(self, commands) -> None:
        """Run a list of setup commands in order.

        Each command is either the name of an action such as ``"reset"`` or
        ``"calibrate_32V_2A"``, or a ``(setting, value)`` pair such as
        ``("mode", Mode.POWER_DOWN)``. A dict is applied in insertion order.
        """
        if isinstance(commands, dict):
            commands = commands.items()
        for command in commands:
            if isinstance(command, str):
                if command not in self._ACTIONS:
                    raise ConfigurationError(f"Unknown INA219 command {command!r}")
                getattr(self, self._ACTIONS[command])()
                continue
            try:
                setting, value = command
            except (TypeError, ValueError):
                raise ConfigurationError(f"Malformed INA219 command {command!r}") from None
            if setting not in self._SETTINGS:
                raise ConfigurationError(f"Unknown INA219 setting {setting!r}")
            setattr(self, self._SETTINGS[setting], value)


def connect(i2c_bus: "I2C", config: dict) -> INA219:
    """Connect to an INA219 described by a configuration dict.

    Recognised keys are ``address`` (defaults to :const:`0x40`), ``name``,
    ``commands``, and the required ``current_divisor`` and ``power_divisor``.
    The device is reset and then the commands are applied. Calibration presets
    leave the configured divisors as they are. Raises :class:`TransportError`
    when no device answers at ``address``.
    """
    for key in ("current_divisor", "power_divisor"):
        if config.get(key) is None:
            raise ConfigurationError(f"INA219 configuration is missing {key!r}")
    address = config.get("address", _INA219_DEFAULT_ADDR)
    name = config.get("name", f"0x{address:02X}")

    logger.info(f"Connecting to INA219 sensor {name}")
    transport = I2CTransport(i2c_bus, address)
    try:
        sensor = INA219(
            transport,
            current_divisor=config["current_divisor"],
            power_divisor=config["power_divisor"],
            name=name,
        )
        sensor.reset()
        sensor.apply_commands(config.get("commands", ()))
    except Exception:
        transport.close()
        raise
    return sensor

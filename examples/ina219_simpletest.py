# SPDX-FileCopyrightText: Copyright (c) 2025 Liz Clark for Adafruit Industries
#
# SPDX-License-Identifier: MIT

import time

import adafruit_logging as logging
import board

import circuitpython_ina219

logging.getLogger("circuitpython_ina219").setLevel(logging.INFO)

# Create I2C bus
i2c = board.I2C()

# Create INA219 instance, reset it and apply the 32V 2A preset
ina219 = circuitpython_ina219.connect(
    i2c,
    {
        "address": 0x40,
        "commands": ["calibrate_32V_2A"],
        "current_divisor": 10,
        "power_divisor": 2,
    },
)

# Configure the sensor (optional - these are just examples)
# ina219.shunt_voltage_pga = circuitpython_ina219.Gain.GAIN_4
# ina219.mode = circuitpython_ina219.Mode.SHUNT_AND_BUS_VOLTAGE_TRIGGERED

samples, bits = ina219.bus_adc_resolution_and_averaging
print(f"Bus ADC: {bits} bit, {samples} sample(s) averaged")
samples, bits = ina219.shunt_adc_resolution_and_averaging
print(f"Shunt ADC: {bits} bit, {samples} sample(s) averaged")
print(f"Bus voltage range: {ina219.bus_voltage_range} V, PGA gain: {ina219.shunt_voltage_pga}")

with ina219:
    while True:
        print("\nCurrent Measurements:")
        print(f"Current: {ina219.current:.2f} mA")
        print(f"Bus Voltage: {ina219.bus_voltage:.2f} V")
        print(f"Shunt Voltage: {ina219.shunt_voltage:.2f} mV")
        print(f"Power: {ina219.power:.2f} mW")

        if ina219.math_overflow:
            print("Math overflow, current and power are out of range")

        time.sleep(1)

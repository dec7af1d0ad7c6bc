"""
Pytest configuration and shared fixtures for the svdhtml test suite.
"""

import sys
import tempfile
from pathlib import Path

import pytest
import yaml

# Ensure project root is on PYTHONPATH so 'svdhtml' can be imported
PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


DEVICE_TEMPLATE = """<?xml version="1.0" encoding="utf-8"?>
<device schemaVersion="1.1">
  <vendor>Acme</vendor>
  <name>{name}</name>
  <description>Test chip</description>
  <access>read-write</access>
  <peripherals>
{peripherals}
  </peripherals>
</device>
"""

# UART1 is declared before the UART0 it derives from on purpose.
UART_PERIPHERALS = """
    <peripheral derivedFrom="UART0">
      <name>UART1</name>
      <baseAddress>0x40001000</baseAddress>
      <interrupt>
        <name>UART1_IRQ</name>
        <value>6</value>
      </interrupt>
      <registers>
        <register>
          <name>CTRL</name>
          <description>UART1 control</description>
          <addressOffset>0x00</addressOffset>
          <fields>
            <field>
              <name>EN</name>
              <bitOffset>0</bitOffset>
              <bitWidth>1</bitWidth>
              <access>read-write</access>
            </field>
          </fields>
        </register>
        <register>
          <name>EXTRA</name>
          <addressOffset>0x20</addressOffset>
        </register>
      </registers>
    </peripheral>
    <peripheral>
      <name>UART0</name>
      <description>Universal
        asynchronous receiver</description>
      <groupName>UART</groupName>
      <baseAddress>0x40000000</baseAddress>
      <interrupt>
        <name>UART0_IRQ</name>
        <description>UART0 global interrupt</description>
        <value>5</value>
      </interrupt>
      <registers>
        <register>
          <name>CTRL</name>
          <description>Control register</description>
          <addressOffset>0x00</addressOffset>
          <resetValue>0x00000000</resetValue>
          <fields>
            <field>
              <name>EN</name>
              <description>Enable</description>
              <bitOffset>0</bitOffset>
              <bitWidth>1</bitWidth>
              <access>read-write</access>
            </field>
            <field>
              <name>BAUD</name>
              <description>Baud rate divisor</description>
              <bitRange>[15:4]</bitRange>
            </field>
          </fields>
        </register>
        <register>
          <name>STATUS</name>
          <addressOffset>0x04</addressOffset>
          <access>read-only</access>
          <fields>
            <field>
              <name>READY</name>
              <bitOffset>0</bitOffset>
              <bitWidth>1</bitWidth>
              <access>read-only</access>
              <enumeratedValues>
                <enumeratedValue>
                  <name>NOT_READY</name>
                  <value>0</value>
                </enumeratedValue>
                <enumeratedValue>
                  <name>IS_READY</name>
                  <description>Data can be read</description>
                  <value>#1</value>
                </enumeratedValue>
              </enumeratedValues>
            </field>
          </fields>
        </register>
        <register>
          <name>DATA</name>
          <addressOffset>16</addressOffset>
          <fields>
            <field>
              <name>DATA</name>
              <lsb>0</lsb>
              <msb>7</msb>
            </field>
          </fields>
        </register>
      </registers>
    </peripheral>
"""

STATUS_PERIPHERAL = """
    <peripheral>
      <name>GPIO</name>
      <baseAddress>0x40000000</baseAddress>
      <registers>
        <register>
          <name>STATUS</name>
          <addressOffset>0x04</addressOffset>
          <fields>
            <field>
              <name>READY</name>
              <bitOffset>0</bitOffset>
              <bitWidth>1</bitWidth>
            </field>
          </fields>
        </register>
      </registers>
    </peripheral>
"""


def make_device(peripherals: str, name: str = "ACME32") -> str:
    return DEVICE_TEMPLATE.format(name=name, peripherals=peripherals)


@pytest.fixture
def svd_document():
    """
    Fixture returning a factory that wraps <peripheral> XML in a <device>.
    """
    return make_device


@pytest.fixture
def uart_svd_text():
    """Two UARTs, UART1 derived from UART0 and declared first."""
    return make_device(UART_PERIPHERALS)


@pytest.fixture
def status_svd_text():
    """One peripheral at 0x40000000 with STATUS.READY at bit 0."""
    return make_device(STATUS_PERIPHERAL)


@pytest.fixture
def uart_svd_file(tmp_path, uart_svd_text):
    """
    Fixture that writes the UART document to a temporary .svd file.

    Yields:
        Path: Path to the SVD file
    """
    path = tmp_path / "acme32.svd"
    path.write_text(uart_svd_text, encoding="utf-8")
    yield path


@pytest.fixture
def temp_yaml_file():
    """
    Fixture that provides a temporary YAML file.

    Yields:
        Path: Path to the temporary YAML file
    """
    with tempfile.NamedTemporaryFile(
        mode="w",
        suffix=".yaml",
        delete=False,
    ) as f:
        temp_path = Path(f.name)

    yield temp_path

    # Cleanup
    if temp_path.exists():
        temp_path.unlink()


@pytest.fixture
def write_yaml(temp_yaml_file):
    """
    Fixture returning a function that dumps a dict into the temp YAML file.
    """

    def _write(data) -> Path:
        with open(temp_yaml_file, "w", encoding="utf-8") as f:
            yaml.dump(data, f)
        return temp_yaml_file

    return _write


def pytest_configure(config):
    """
    Hook for initial pytest configuration.

    Used to add custom markers and configuration.
    """
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests",
    )
    config.addinivalue_line("markers", "unit: marks tests as unit tests")

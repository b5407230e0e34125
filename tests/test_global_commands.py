from unittest.mock import Mock

import pytest

from zigwire.exceptions import ProtocolStatusError
from zigwire.zcl import FrameCodec, GlobalCommandInterpreter
from zigwire.zcl import foundation

from tests.conftest import catchall, read_attr


@pytest.fixture
def interpreter():
    return GlobalCommandInterpreter()


def test_default_response_success(interpreter):
    result = interpreter.interpret(FrameCodec.parse(catchall(0x0102, 0x0B, "0500")))

    assert result.handled
    assert result.success
    assert result.status == foundation.Status.SUCCESS
    assert result.echoed_command_id == 0x05
    assert result.error is None


def test_default_response_failure(interpreter, caplog):
    result = interpreter.interpret(FrameCodec.parse(catchall(0x0102, 0x0B, "0501")))

    assert result.handled
    assert not result.success
    assert result.status == foundation.Status.FAILURE
    assert isinstance(result.error, ProtocolStatusError)
    assert result.error.command_id == 0x05
    assert result.error.cluster_id == 0x0102
    assert result.error.status == foundation.Status.FAILURE
    assert "Window Covering (0x0102) cluster" in caplog.text


def test_default_response_too_short(interpreter, caplog):
    result = interpreter.interpret(FrameCodec.parse(catchall(0x0102, 0x0B, "05")))

    assert not result.handled
    assert not result.success
    assert result.status is None
    assert "Default response is too short" in caplog.text


def test_write_attributes_rsp_success(interpreter):
    result = interpreter.interpret(FrameCodec.parse(catchall(0xFCC0, 0x04, "00")))

    assert result.success
    assert result.status == foundation.Status.SUCCESS


def test_write_attributes_rsp_failure(interpreter):
    result = interpreter.interpret(FrameCodec.parse(catchall(0xFCC0, 0x04, "860001")))

    assert not result.success
    assert result.status == foundation.Status.UNSUPPORTED_ATTRIBUTE
    assert result.error.command_id == foundation.GeneralCommand.Write_Attributes


def test_write_attributes_rsp_status_as_value(interpreter):
    frame = FrameCodec.parse(read_attr(0xFCC0, 0x0000, 0x20, "00", command=0x04))
    result = interpreter.interpret(frame)

    assert result.success


def test_write_attributes_rsp_empty(interpreter, caplog):
    result = interpreter.interpret(FrameCodec.parse(catchall(0xFCC0, 0x04)))

    assert not result.handled
    assert not result.success
    assert "Write attributes response without status" in caplog.text


def test_configure_reporting_rsp(interpreter, caplog):
    with caplog.at_level("INFO"):
        result = interpreter.interpret(FrameCodec.parse(catchall(0x0001, 0x07, "00")))

    assert result.success
    assert "Reporting for Power Configuration (0x0001) cluster enabled" in caplog.text


def test_unhandled_goes_to_trace_sink():
    sink = Mock()
    interpreter = GlobalCommandInterpreter(trace_sink=sink)
    frame = FrameCodec.parse(catchall(0x0006, 0x0D, "01"))

    result = interpreter.interpret(frame)

    assert not result.handled
    assert not result.success
    sink.assert_called_once_with(frame)


def test_unhandled_without_sink(interpreter):
    result = interpreter.interpret(FrameCodec.parse(catchall(0x1234, 0x0D)))

    assert not result.handled


def test_handled_commands(interpreter):
    assert interpreter.handled_commands == {
        foundation.GeneralCommand.Write_Attributes_rsp,
        foundation.GeneralCommand.Configure_Reporting_rsp,
        foundation.GeneralCommand.Default_Response,
    }

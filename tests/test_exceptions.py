"""Tests for hdcpush exceptions."""

from pathlib import Path

from hdcpush.exceptions import AmbiguousDevicePathError, HdcPushError, TransferError


def test_ambiguous_message_lists_candidates():
    error = AmbiguousDevicePathError(
        {Path("/oh/out/libdup.so"): ["system/lib/libdup.so", "vendor/lib/libdup.so"]}
    )

    assert isinstance(error, HdcPushError)
    assert "1 file(s)" in error.message
    assert "/oh/out/libdup.so: system/lib/libdup.so, vendor/lib/libdup.so" in error.message


def test_transfer_error_context():
    error = TransferError("boom", device_id="dev1", command=["hdc"], returncode=3)

    assert str(error) == "boom"
    assert error.device_id == "dev1"
    assert error.command == ["hdc"]
    assert error.returncode == 3

import pytest

from ipl3hasher.errors import ChecksumVerifyError, HasherError


def test_message_format():
    error = ChecksumVerifyError(0x12, 0xAB, 0x1234)
    assert str(error) == "GPU Hasher result is wrong: Y=00000012 X=000000AB | 0x000000001234"


def test_attributes_kept():
    error = ChecksumVerifyError(1, 2, 3)
    assert (error.y, error.x, error.checksum) == (1, 2, 3)


def test_caught_as_hasher_error():
    error = ChecksumVerifyError(0xFFFFFFFF, 0, 0xA536C0F1D859)
    assert error.checksum == 0xA536C0F1D859
    assert str(error) == "GPU Hasher result is wrong: Y=FFFFFFFF X=00000000 | 0xA536C0F1D859"

    with pytest.raises(HasherError) as excinfo:
        raise error

    assert excinfo.value is error
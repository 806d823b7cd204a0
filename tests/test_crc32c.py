import pytest

from lvutil.crc32c import extend, mask, unmask, value


def test_standard_results_zeros():
    assert value(bytes(32)) == 0x8A9136AA


def test_standard_results_ones():
    assert value(b"\xff" * 32) == 0x62A8AB43


def test_standard_results_ascending():
    assert value(bytes(range(32))) == 0x46DD794E


def test_standard_results_descending():
    assert value(bytes(31 - i for i in range(32))) == 0x113FDB5C


def test_standard_results_iscsi_frame():
    data = bytes([
        0x01, 0xC0, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
        0x00, 0x00, 0x00, 0x00, 0x14, 0x00, 0x00, 0x00, 0x00, 0x00, 0x04, 0x00,
        0x00, 0x00, 0x00, 0x14, 0x00, 0x00, 0x00, 0x18, 0x28, 0x00, 0x00, 0x00,
        0x00, 0x00, 0x00, 0x00, 0x02, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00, 0x00,
    ])
    assert value(data) == 0xD9963A56


def test_known_test_buffer_value():
    assert value(b"TestCRCBuffer") == 0xDCBC59FA


def test_empty_input():
    assert value(b"") == 0


def test_values_differ():
    assert value(b"a") != value(b"foo")


def test_extend():
    assert value(b"hello world") == extend(value(b"hello "), b"world")


@pytest.mark.parametrize("split", [0, 1, 5, 17, 40, 99, 100])
def test_extend_at_any_split(split):
    data = bytes((i * 37 + 11) & 0xFF for i in range(100))
    assert extend(value(data[:split]), data[split:]) == value(data)


def test_accepts_bytearray_and_memoryview():
    raw = b"some bytes here"
    assert value(bytearray(raw)) == value(raw)
    assert value(memoryview(raw)) == value(raw)


def test_mask():
    crc = value(b"foo")
    assert mask(crc) != crc
    assert mask(mask(crc)) != crc
    assert unmask(mask(crc)) == crc
    assert unmask(unmask(mask(mask(crc)))) == crc


@pytest.mark.parametrize("crc", [0, 1, 0x7FFFFFFF, 0x80000000, 0xFFFFFFFF])
def test_mask_round_trip_edges(crc):
    masked = mask(crc)
    assert 0 <= masked <= 0xFFFFFFFF
    assert unmask(masked) == crc


def test_extend_rejects_out_of_range_crc():
    with pytest.raises(ValueError):
        extend(1 << 32, b"x")
from lvutil.hashing import hash_bytes


def _sparse_block():
    """A 48-byte block, zero except at a few positions."""
    block = bytearray(48)
    for position, byte in {
        0: 0x01,
        1: 0xC0,
        16: 0x14,
        22: 0x04,
        27: 0x14,
        31: 0x18,
        32: 0x28,
        40: 0x02,
    }.items():
        block[position] = byte
    return bytes(block)


SPARSE_BLOCK = _sparse_block()


def test_empty():
    assert hash_bytes(b"", 0xBC9F1D34) == 0xBC9F1D34


def test_signed_unsigned_issue():
    assert hash_bytes(b"\x62", 0xBC9F1D34) == 0xEF1345C4
    assert hash_bytes(b"\xc3\x97", 0xBC9F1D34) == 0x5B663814
    assert hash_bytes(b"\xe2\x99\xa5", 0xBC9F1D34) == 0x323C078F
    assert hash_bytes(b"\xe1\x80\xb9\x32", 0xBC9F1D34) == 0xED21633A
    assert hash_bytes(SPARSE_BLOCK, 0x12345678) == 0xF333DABB


def test_accepts_bytearray():
    assert hash_bytes(bytearray(b"\x62"), 0xBC9F1D34) == 0xEF1345C4
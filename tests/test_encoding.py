import unittest

from cpauth.constants import get_group
from cpauth.encoding import bytes_to_int, check_range, hex_to_int, int_to_bytes, int_to_hex
from cpauth.exceptions import MalformedInput


class TestIntegerCodec(unittest.TestCase):
    def test_boundary_values_round_trip(self) -> None:
        params = get_group("rfc5114-1024-160")
        for value in (0, 1, params.q - 1, params.p - 1, params.p - 2):
            with self.subTest(value=value):
                self.assertEqual(bytes_to_int(int_to_bytes(value)), value)
                self.assertEqual(hex_to_int(int_to_hex(value)), value)

    def test_big_endian_minimal_length(self) -> None:
        self.assertEqual(int_to_bytes(0), b"\x00")
        self.assertEqual(int_to_bytes(255), b"\xff")
        self.assertEqual(int_to_bytes(256), b"\x01\x00")

    def test_values_wider_than_a_machine_word(self) -> None:
        params = get_group("rfc5114-2048-224")
        encoded = int_to_bytes(params.p - 1)
        self.assertEqual(len(encoded), 256)
        self.assertEqual(bytes_to_int(encoded), params.p - 1)

    def test_negative_rejected(self) -> None:
        with self.assertRaises(ValueError):
            int_to_bytes(-1)

    def test_empty_bytes_decode_to_zero(self) -> None:
        self.assertEqual(bytes_to_int(b""), 0)


class TestHex(unittest.TestCase):
    def test_accepts_prefix_and_odd_length(self) -> None:
        self.assertEqual(hex_to_int("0x1f"), 31)
        self.assertEqual(hex_to_int("abc"), 0xABC)

    def test_malformed_hex(self) -> None:
        with self.assertRaises(MalformedInput):
            hex_to_int("zz", "y1")


class TestRange(unittest.TestCase):
    def test_check_range(self) -> None:
        self.assertEqual(check_range(0, 23), 0)
        self.assertEqual(check_range(22, 23), 22)
        with self.assertRaises(MalformedInput):
            check_range(23, 23)
        with self.assertRaises(MalformedInput):
            check_range(-1, 23)


if __name__ == "__main__":
    unittest.main()

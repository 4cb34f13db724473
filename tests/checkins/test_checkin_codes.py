import hashlib

from shiftdesk.checkins.codes import generate_code, hash_code, is_valid_format, verify_code


def test_generated_codes_are_six_digits():
    for _ in range(50):
        code = generate_code()
        assert is_valid_format(code)


def test_format_rejects_anything_but_six_digits():
    assert not is_valid_format("12345")
    assert not is_valid_format("1234567")
    assert not is_valid_format("12a456")
    assert not is_valid_format("")


def test_verify_accepts_current_and_legacy_hashes():
    current = hash_code("042137", "pepper")
    legacy = hashlib.sha256(b"pepper:042137").hexdigest()

    assert current == hashlib.sha256(b"042137:pepper").hexdigest()
    assert verify_code("042137", "pepper", current)
    assert verify_code("042137", "pepper", legacy.upper())
    assert not verify_code("042138", "pepper", current)
    assert not verify_code("042137", "other", current)

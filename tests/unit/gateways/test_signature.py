import hashlib

from app.infrastructure.gateways import signature

SECRET = "s3cret"


def test_token_is_sha256_of_sorted_pairs_plus_secret():
    payload = {"PaymentId": "42", "Amount": 50000, "Status": "CONFIRMED"}

    expected = hashlib.sha256(b"Amount=50000PaymentId=42Status=CONFIRMEDs3cret").hexdigest()

    assert signature.sign(payload, SECRET) == expected


def test_token_nested_and_empty_fields_are_excluded():
    base = {"PaymentId": "42", "Success": True}
    noisy = {**base, "Token": "abc", "DATA": {"x": 1}, "Receipt": [], "ErrorCode": None, "Message": ""}

    assert signature.sign(noisy, SECRET) == signature.sign(base, SECRET)
    assert "Success=true" in signature.canonical_string(base, SECRET)


def test_verify_round_trip_and_tamper_detection():
    signed = signature.with_token({"PaymentId": "42", "Status": "CONFIRMED"}, SECRET)

    assert signature.verify(signed, SECRET)
    assert not signature.verify({**signed, "Status": "REJECTED"}, SECRET)
    assert not signature.verify(signed, "other-secret")


def test_verify_accepts_uppercase_token():
    signed = signature.with_token({"PaymentId": "42"}, SECRET)
    signed["Token"] = signed["Token"].upper()

    assert signature.verify(signed, SECRET)


def test_verify_rejects_missing_token():
    assert not signature.verify({"PaymentId": "42"}, SECRET)
    assert not signature.verify({"PaymentId": "42", "Token": 123}, SECRET)

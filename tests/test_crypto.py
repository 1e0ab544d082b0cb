from authvault.crypto import (
    ed25519_generate, ed25519_sign, ed25519_verify, x25519_generate,
    generate_registration_id, init_auth_creds, verify_signed_pre_key,
)


def test_sign_verify():
    priv, pub = ed25519_generate()
    sig = ed25519_sign(priv, b"payload")
    assert ed25519_verify(pub, sig, b"payload")
    assert not ed25519_verify(pub, sig, b"tampered")
    assert not ed25519_verify(b"short", sig, b"payload")


def test_x25519_sizes():
    priv, pub = x25519_generate()
    assert len(priv) == 32 and len(pub) == 32


def test_init_auth_creds_shape():
    creds = init_auth_creds()
    for k in ("noise_key", "pairing_ephemeral_key_pair", "signed_identity_key"):
        assert len(creds[k]["private"]) == 32
        assert len(creds[k]["public"]) == 32
    assert creds["signed_pre_key"]["key_id"] == 1
    assert creds["next_pre_key_id"] == 1
    assert creds["first_unuploaded_pre_key_id"] == 1
    assert creds["account_settings"] == {"unarchive_chats": False}
    assert creds["registered"] is False
    assert creds["processed_history_messages"] == []
    assert 0 <= creds["registration_id"] < 16384


def test_signed_pre_key_verifies():
    creds = init_auth_creds()
    assert verify_signed_pre_key(creds)

    creds["signed_pre_key"]["key_pair"]["public"] = bytes(32)
    assert not verify_signed_pre_key(creds)


def test_fresh_creds_differ():
    a, b = init_auth_creds(), init_auth_creds()
    assert a["noise_key"]["private"] != b["noise_key"]["private"]
    assert a["adv_secret_key"] != b["adv_secret_key"]


def test_registration_id_range():
    assert all(0 <= generate_registration_id() < 16384 for _ in range(200))

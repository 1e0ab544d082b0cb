"""
authvault.crypto
----------------
Key generation for a fresh credential bundle.

- X25519: noise key, pairing ephemeral key, signed pre-key
- Ed25519: identity key, used to sign the pre-key

Key pairs are plain dicts ({"private": bytes, "public": bytes}) so the
bundle serializes through authvault.serialization unchanged.
"""

from __future__ import annotations
from typing import Any, Dict, Tuple
from cryptography.hazmat.primitives.asymmetric import ed25519, x25519
from cryptography.exceptions import InvalidSignature
import os, secrets
from .utils import b64e

# key-type prefix prepended to a Curve25519 public key before signing
KEY_BUNDLE_TYPE = b"\x05"

# --------- Ed25519 (sign/verify) ----------
def ed25519_generate() -> Tuple[bytes, bytes]:
    sk = ed25519.Ed25519PrivateKey.generate()
    return sk.private_bytes_raw(), sk.public_key().public_bytes_raw()

def ed25519_sign(priv_raw: bytes, data: bytes) -> bytes:
    return ed25519.Ed25519PrivateKey.from_private_bytes(priv_raw).sign(data)

def ed25519_verify(pub_raw: bytes, sig: bytes, data: bytes) -> bool:
    try:
        ed25519.Ed25519PublicKey.from_public_bytes(pub_raw).verify(sig, data)
        return True
    except (InvalidSignature, ValueError):
        return False

# --------- X25519 ----------
def x25519_generate() -> Tuple[bytes, bytes]:
    sk = x25519.X25519PrivateKey.generate()
    return sk.private_bytes_raw(), sk.public_key().public_bytes_raw()

# --------- Bundle helpers ----------
def key_pair(generate=x25519_generate) -> Dict[str, bytes]:
    priv, pub = generate()
    return {"private": priv, "public": pub}

def signed_key_pair(identity: Dict[str, bytes], key_id: int) -> Dict[str, Any]:
    pre_key = key_pair()
    sig = ed25519_sign(identity["private"], KEY_BUNDLE_TYPE + pre_key["public"])
    return {"key_pair": pre_key, "signature": sig, "key_id": key_id}

def verify_signed_pre_key(creds: Dict[str, Any]) -> bool:
    spk = creds["signed_pre_key"]
    return ed25519_verify(
        creds["signed_identity_key"]["public"],
        spk["signature"],
        KEY_BUNDLE_TYPE + spk["key_pair"]["public"],
    )

def generate_registration_id() -> int:
    return secrets.randbits(16) & 16383

def init_auth_creds() -> Dict[str, Any]:
    """Build a brand-new, unregistered credential bundle."""
    identity = key_pair(ed25519_generate)
    return {
        "noise_key": key_pair(),
        "pairing_ephemeral_key_pair": key_pair(),
        "signed_identity_key": identity,
        "signed_pre_key": signed_key_pair(identity, 1),
        "registration_id": generate_registration_id(),
        "adv_secret_key": b64e(os.urandom(32)),
        "processed_history_messages": [],
        "next_pre_key_id": 1,
        "first_unuploaded_pre_key_id": 1,
        "account_sync_counter": 0,
        "account_settings": {"unarchive_chats": False},
        "registered": False,
        "pairing_code": None,
        "last_prop_hash": None,
        "routing_info": None,
    }

import posixpath
import random
import re

import pytest

from bpm.jobid import InvalidJobIDError, decode, encode

_ID_REGEX = re.compile(r"^[\w+-\.]+$", re.ASCII)


def valid_runc_id(job_id):
    return bool(_ID_REGEX.match(job_id)) and "/" + job_id == posixpath.normpath(
        "/" + job_id
    )


@pytest.mark.parametrize(
    "name, expected",
    [
        ("", "bpm-"),
        ("_", "bpm-_"),
        ("test-server", "bpm-test-server"),
        ("test-server.alt-test-server", "bpm-test-server.2ealt-test-server"),
        ("test-server!@*&", "bpm-test-server.21.40.2a.26"),
        ("test_server", "bpm-test_server"),
    ],
)
def test_encode(name, expected):
    encoded = encode(name)
    assert encoded == expected
    assert valid_runc_id(encoded)


@pytest.mark.parametrize(
    "job_id, expected",
    [
        ("bpm-", ""),
        ("bpm-test-server", "test-server"),
        ("bpm-test-server.2ealt-test-server", "test-server.alt-test-server"),
        ("bpm-test-server.21.40.2a.26", "test-server!@*&"),
        ("bpm-test_server", "test_server"),
    ],
)
def test_decode(job_id, expected):
    assert decode(job_id) == expected


@pytest.mark.parametrize("job_id", ["unknown", "bpm-."])
def test_decode_invalid(job_id):
    with pytest.raises(InvalidJobIDError):
        decode(job_id)


def test_invalid_error_is_value_error():
    with pytest.raises(ValueError):
        decode("unknown")


def test_tiny_literals_edge_case():
    name = "someinput\x06aroundtheproblem"
    encoded = encode(name)
    assert valid_runc_id(encoded)
    assert decode(encoded) == name


def _random_names(count):
    rng = random.Random(1234)
    alphabet = [chr(c) for c in range(0, 256)] + ["é", "日", "🙂", ".", "/", ".."]
    for _ in range(count):
        length = rng.randint(0, 30)
        yield "".join(rng.choice(alphabet) for _ in range(length))


@pytest.mark.parametrize("name", list(_random_names(100)))
def test_roundtrip(name):
    encoded = encode(name)
    assert valid_runc_id(encoded)
    assert decode(encoded) == name


@pytest.mark.parametrize("name", ["..", ".", "a/b", "../etc"])
def test_path_like_names_roundtrip(name):
    encoded = encode(name)
    assert valid_runc_id(encoded)
    assert "/" not in encoded
    assert decode(encoded) == name
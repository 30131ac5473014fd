from curl_effector.core.arguments import (
    CONNECT_TIMEOUT,
    RETRY_COUNT,
    build_get_args,
    build_post_args,
    format_header_args,
    hardening_flags,
)
from curl_effector.core.types import HttpHeader

HARDENING = ["--connect-timeout", "4", "--no-progress-meter", "--retry", "0"]
URL = "http://localhost:8080/"


def _headers():
    return [
        HttpHeader("content-type", "application/json"),
        HttpHeader("X-B", "2"),
        HttpHeader("X-A", "1"),
        HttpHeader("X-B", "3"),
    ]


def test_fixed_policy_constants():
    assert CONNECT_TIMEOUT == 4
    assert RETRY_COUNT == 0
    assert hardening_flags() == HARDENING


def test_get_argument_layout():
    args = build_get_args(URL, [HttpHeader("content-type", "application/json")], "/v/out.json")
    assert args == [
        URL,
        "-X",
        "GET",
        "-H",
        "content-type: application/json",
        "-o",
        "/v/out.json",
        *HARDENING,
    ]


def test_post_argument_layout():
    args = build_post_args(
        URL, [HttpHeader("content-type", "application/json")], "/v/in.json", "/v/out.json"
    )
    assert args == [
        URL,
        "-X",
        "POST",
        "--data",
        "@/v/in.json",
        "-o",
        "/v/out.json",
        "-H",
        "content-type: application/json",
        *HARDENING,
    ]


def test_hardening_flags_appear_once_at_the_end():
    for args in (
        build_get_args(URL, _headers(), "/v/o"),
        build_get_args(URL, [], "/v/o"),
        build_post_args(URL, _headers(), "/v/i", "/v/o"),
        build_post_args(URL, [], "/v/i", "/v/o"),
    ):
        assert args[-len(HARDENING):] == HARDENING
        for flag in ("--connect-timeout", "--no-progress-meter", "--retry"):
            assert args.count(flag) == 1


def test_header_pairs_follow_input_order():
    expected = ["content-type: application/json", "X-B: 2", "X-A: 1", "X-B: 3"]
    for args in (
        build_get_args(URL, _headers(), "/v/o"),
        build_post_args(URL, _headers(), "/v/i", "/v/o"),
    ):
        rendered = [args[i + 1] for i, tok in enumerate(args) if tok == "-H"]
        assert rendered == expected


def test_header_formatting_is_two_tokens_per_header():
    assert format_header_args([HttpHeader("a", "b"), HttpHeader("c", "")]) == [
        "-H",
        "a: b",
        "-H",
        "c: ",
    ]
    assert format_header_args([]) == []


def test_builders_return_fresh_lists():
    a = build_get_args(URL, [], "/v/o")
    a.append("--mutated")
    assert build_get_args(URL, [], "/v/o")[-1] == "0"

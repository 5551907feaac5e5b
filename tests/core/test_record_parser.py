from __future__ import annotations

from myq_samples.core.models import Layout, RawRecord
from myq_samples.core.record_parser import parse_record


def _batch(text: str) -> RawRecord:
    return RawRecord(data=text.encode("utf-8"), layout=Layout.BATCH)


def _tabular(text: str) -> RawRecord:
    return RawRecord(data=text.encode("utf-8"), layout=Layout.TABULAR)


def test_batch_key_value_lines() -> None:
    sample = parse_record(_batch("foo\tbar\nUptime\t100\n"))
    assert sample == {"foo": "bar", "uptime": "100"}


def test_batch_skips_lines_without_exactly_two_fields() -> None:
    sample = parse_record(_batch("\n   \n \t \n\t\t\nno tab here\na\tb\tc\nThreads_connected\t3\n"))
    assert sample == {"threads_connected": "3"}


def test_batch_keeps_empty_values_verbatim() -> None:
    sample = parse_record(_batch("Rsa_public_key\t\nSsl_cipher\t \n"))
    assert sample == {"rsa_public_key": "", "ssl_cipher": " "}


def test_batch_ignores_empty_keys() -> None:
    assert parse_record(_batch("\tvalue\n")) == {}


def test_key_case_is_normalized_and_last_line_wins() -> None:
    sample = parse_record(_batch("Threads_connected\t3\nthreads_connected\t7\n"))
    assert sample == {"threads_connected": "7"}


def test_tabular_rows(make_table) -> None:
    text = make_table([("Aborted_clients", "0"), ("Threads_connected", "3"), ("Uptime", "100")])
    # header row is consumed by the segmenter, drop it here the same way
    body = text.split("| Variable_name", 1)[1].split("\n", 1)[1]

    sample = parse_record(_tabular(body))

    assert sample == {"aborted_clients": "0", "threads_connected": "3", "uptime": "100"}


def test_tabular_ignores_frame_and_footer_lines() -> None:
    text = "+-----+-----+\n| foo | bar |\n+-----+-----+\n1 row in set (0.00 sec)\n\n"
    assert parse_record(_tabular(text)) == {"foo": "bar"}


def test_tabular_value_may_contain_spaces() -> None:
    text = "| Ssl_cipher_list | AES128 SHA AES256 |\n| Ssl_version     | TLSv1.3           |\n"
    sample = parse_record(_tabular(text))
    assert sample == {"ssl_cipher_list": "AES128 SHA AES256", "ssl_version": "TLSv1.3"}


def test_tabular_truncated_row_is_dropped() -> None:
    text = "| Threads_connected | 3 |\n| Upt"
    assert parse_record(_tabular(text)) == {"threads_connected": "3"}


def test_tabular_divider_offset_is_fixed_per_record() -> None:
    # Misaligned rows are unsupported: the offset from the first row is reused as-is.
    text = "| a | 1 |\n| long_key | 2 |\n"
    sample = parse_record(_tabular(text))
    assert sample["a"] == "1"
    assert "long_key" not in sample


def test_tabular_empty_record() -> None:
    assert parse_record(_tabular("+-----+-----+\n")) == {}


def test_invalid_utf8_is_replaced() -> None:
    sample = parse_record(RawRecord(data=b"Name\t\xff\xfe\n", layout=Layout.BATCH))
    assert sample == {"name": "\ufffd\ufffd"}

# tests/test_format.py
"""
Tests for the format string encoder and its caching on descriptors.
"""
import re
import threading

import pytest

from ndexport import (
    ByteOrder,
    ElementDescriptor,
    ElementKind,
    encode_format,
    AllocationFailureError,
    InvalidFieldNameError,
    InvalidWidthError,
    UnknownElementTypeError,
    UnsupportedLayoutError,
)
from ndexport._internal import format_encoder

SCALAR_CODES = {
    ElementKind.BYTE: "b",
    ElementKind.UBYTE: "B",
    ElementKind.SHORT: "h",
    ElementKind.USHORT: "H",
    ElementKind.INT: "i",
    ElementKind.UINT: "I",
    ElementKind.LONG: "l",
    ElementKind.ULONG: "L",
    ElementKind.LONGLONG: "q",
    ElementKind.ULONGLONG: "Q",
    ElementKind.FLOAT: "f",
    ElementKind.DOUBLE: "d",
    ElementKind.LONGDOUBLE: "g",
    ElementKind.CFLOAT: "Zf",
    ElementKind.CDOUBLE: "Zd",
    ElementKind.CLONGDOUBLE: "Zg",
    ElementKind.OBJECT: "O",
}

ORDERLESS_KINDS = {ElementKind.BYTE, ElementKind.UBYTE, ElementKind.OBJECT}


@pytest.mark.parametrize("kind", list(SCALAR_CODES))
@pytest.mark.parametrize("order", list(ByteOrder))
def test_scalar_codes_and_byte_order_prefix(kind, order):
    """The prefix appears only for explicit orders on order-relevant kinds."""
    desc = ElementDescriptor.scalar(kind, byteorder=order)
    code = SCALAR_CODES[kind]
    if kind in ORDERLESS_KINDS or order in (ByteOrder.DEFAULT, ByteOrder.NOT_APPLICABLE):
        assert encode_format(desc) == code
    else:
        assert encode_format(desc) == order.value + code

def test_fixed_byte_string():
    assert encode_format(ElementDescriptor.scalar(ElementKind.STRING, 5)) == "5s"
    assert encode_format(ElementDescriptor.scalar(ElementKind.STRING, 5, ByteOrder.BIG)) == "5s"

def test_wide_string_counts_characters():
    assert encode_format(ElementDescriptor.scalar(ElementKind.UNICODE, 12)) == "3w"
    assert encode_format(ElementDescriptor.scalar(ElementKind.UNICODE, 12, ByteOrder.LITTLE)) == "<3w"

def test_wide_string_with_inexact_width_fails():
    with pytest.raises(InvalidWidthError):
        encode_format(ElementDescriptor.scalar(ElementKind.UNICODE, 6))

@pytest.mark.parametrize("kind", [
    ElementKind.BOOL,
    ElementKind.HALF,
    ElementKind.DATETIME,
    ElementKind.TIMEDELTA,
])
def test_kinds_outside_the_grammar_fail(kind):
    with pytest.raises(UnknownElementTypeError) as excinfo:
        encode_format(ElementDescriptor.scalar(kind))
    assert excinfo.value.kind == int(kind)

def test_void_without_fields_is_unknown():
    with pytest.raises(UnknownElementTypeError):
        encode_format(ElementDescriptor.scalar(ElementKind.VOID, 8))

def test_empty_record_encodes_as_empty_struct():
    empty = ElementDescriptor.record([], itemsize=4)
    assert empty.is_record()
    assert empty.fields == ()
    assert empty.format == "T{}"

def test_padded_record_encoding(padded_record):
    assert padded_record.itemsize == 16
    assert encode_format(padded_record) == "T{B:a:xxxxxxxd:b:}"

def test_nested_record_uses_offsets_relative_to_each_record():
    inner = ElementDescriptor.record([
        ("s", 0, ElementDescriptor.scalar(ElementKind.SHORT, 2)),
        ("t", 4, ElementDescriptor.scalar(ElementKind.INT, 4)),
    ])
    outer = ElementDescriptor.record([
        ("p", 0, ElementDescriptor.scalar(ElementKind.UBYTE)),
        ("inner", 4, inner),
    ])
    assert outer.itemsize == 12
    assert encode_format(outer) == "T{B:p:xxxT{h:s:xxi:t:}:inner:}"

def test_padding_count_matches_offset_gaps():
    def d():
        return ElementDescriptor.scalar(ElementKind.DOUBLE, 8, ByteOrder.LITTLE)

    def b():
        return ElementDescriptor.scalar(ElementKind.UBYTE)

    fields = [("f0", 0, b()), ("f1", 3, d()), ("f2", 11, b()), ("f3", 16, d()), ("f4", 24, b())]
    fmt = encode_format(ElementDescriptor.record(fields, itemsize=32))

    paddings = [len(m) for m in re.findall(r"(?:^T\{|:[^:]+:)(x*)", fmt)][: len(fields)]
    cursor = 0
    expected = []
    for _, offset, desc in fields:
        expected.append(offset - cursor)
        cursor = offset + desc.itemsize
    assert paddings == expected
    # No trailing padding is written after the last field.
    assert fmt.endswith(":f4:}")

def test_record_encoding_is_idempotent(padded_record):
    assert encode_format(padded_record) == encode_format(padded_record)

def test_field_name_with_separator_fails():
    desc = ElementDescriptor.record([("a:b", 0, ElementDescriptor.scalar(ElementKind.INT))])
    with pytest.raises(InvalidFieldNameError) as excinfo:
        encode_format(desc)
    assert excinfo.value.name == "a:b"

def test_unencodable_field_name_fails():
    desc = ElementDescriptor.record([("bad\udcff", 0, ElementDescriptor.scalar(ElementKind.INT))])
    with pytest.raises(InvalidFieldNameError):
        encode_format(desc)

def test_non_ascii_field_names_are_kept():
    desc = ElementDescriptor.record([("température", 0, ElementDescriptor.scalar(ElementKind.FLOAT))])
    assert encode_format(desc) == "T{f:température:}"

def test_subarray_fails():
    sub = ElementDescriptor.subarray(ElementDescriptor.scalar(ElementKind.FLOAT), (2, 3))
    assert sub.itemsize == 24
    with pytest.raises(UnsupportedLayoutError):
        encode_format(sub)

def test_nested_subarray_fails_without_partial_result():
    sub = ElementDescriptor.subarray(ElementDescriptor.scalar(ElementKind.FLOAT), (2,))
    desc = ElementDescriptor.record([
        ("ok", 0, ElementDescriptor.scalar(ElementKind.INT)),
        ("vec", 4, sub),
    ])
    with pytest.raises(UnsupportedLayoutError):
        desc.format
    # Nothing was published; the failure repeats.
    with pytest.raises(UnsupportedLayoutError):
        desc.format

def test_format_is_computed_once(padded_record, monkeypatch):
    first = padded_record.format
    calls = []
    monkeypatch.setattr(format_encoder, "encode", lambda d: calls.append(d) or "changed")
    assert padded_record.format is first
    assert calls == []

def test_format_is_shared_across_threads():
    desc = ElementDescriptor.record([
        (f"f{i}", i * 8, ElementDescriptor.scalar(ElementKind.DOUBLE, 8)) for i in range(64)
    ])
    barrier = threading.Barrier(8, timeout=10)
    results = []

    def read_format():
        barrier.wait()
        results.append(desc.format)

    threads = [threading.Thread(target=read_format) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(results) == 8
    assert all(r is results[0] for r in results)

def test_memory_error_becomes_allocation_failure(padded_record, monkeypatch):
    def exhausted(descriptor, out):
        raise MemoryError

    monkeypatch.setattr(format_encoder, "_encode_into", exhausted)
    with pytest.raises(AllocationFailureError):
        padded_record.format

    monkeypatch.undo()
    assert padded_record.format == "T{B:a:xxxxxxxd:b:}"

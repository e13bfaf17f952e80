from remote_protocol import FRAME_DELIMITER, FrameAssembler


def _feed_all(assembler, chunks):
    frames = []
    for chunk in chunks:
        frames.extend(assembler.feed(chunk))
    return frames


def test_delimiter_split_across_chunks():
    assembler = FrameAssembler()
    frames = _feed_all(assembler, ['{"a":1}---Mess', 'age--End---{"b":2}---Message--End---'])
    assert frames == ['{"a":1}', '{"b":2}']
    assert assembler.pending == ""


def test_back_to_back_delimiters_yield_nothing():
    assembler = FrameAssembler()
    assert assembler.feed("---Message--End------Message--End---") == []
    assert assembler.pending == ""


def test_trailing_fragment_is_kept_until_completed():
    assembler = FrameAssembler()
    assert assembler.feed('{"a":1}---Message--End---{"b"') == ['{"a":1}']
    assert assembler.pending == '{"b"'
    assert assembler.feed(":2}") == []
    assert assembler.feed(FRAME_DELIMITER) == ['{"b":2}']


def test_frame_count_matches_delimiters_for_any_chunking():
    stream = "".join(f"frame-{i}{FRAME_DELIMITER}" for i in range(7))
    expected = [f"frame-{i}" for i in range(7)]
    for size in (1, 2, 5, 17, len(stream)):
        assembler = FrameAssembler()
        chunks = [stream[i : i + size] for i in range(0, len(stream), size)]
        assert _feed_all(assembler, chunks) == expected
        assert assembler.pending == ""


def test_binary_chunks_with_split_multibyte_character():
    assembler = FrameAssembler()
    data = f'{{"t":"héllo"}}{FRAME_DELIMITER}'.encode("utf-8")
    cut = data.index("é".encode("utf-8")) + 1
    assert assembler.feed(data[:cut]) == []
    assert assembler.feed(data[cut:]) == ['{"t":"héllo"}']


def test_reset_drops_pending_fragment():
    assembler = FrameAssembler()
    assembler.feed('{"half"')
    assembler.reset()
    assert assembler.pending == ""
    assert assembler.feed('{"b":2}' + FRAME_DELIMITER) == ['{"b":2}']


def test_invalid_utf8_becomes_replacement_characters():
    assembler = FrameAssembler()
    frames = assembler.feed(b"\xff\xfe" + FRAME_DELIMITER.encode("utf-8"))
    assert frames == ["\ufffd\ufffd"]
    assert assembler.feed('{"b":2}' + FRAME_DELIMITER) == ['{"b":2}']

import os
import random
import tempfile
import unittest

from modal_pad.buffer import TextBuffer


class TestTextBuffer(unittest.TestCase):

    def setUp(self):
        self.buffer = TextBuffer("ab\ncd")

    def test_empty_buffer_has_one_empty_line(self):
        buffer = TextBuffer()
        self.assertEqual(buffer.line_count(), 1)
        self.assertEqual(buffer.line(0), "")
        self.assertEqual(buffer.char_count(), 0)

    def test_trailing_newline_gives_empty_last_line(self):
        buffer = TextBuffer("hi\n")
        self.assertEqual(buffer.lines, ["hi", ""])
        self.assertEqual(buffer.line_count(), 2)

    def test_line_queries(self):
        self.assertEqual(self.buffer.line(1), "cd")
        self.assertEqual(self.buffer.line_length(0), 2)
        self.assertEqual(self.buffer.line_start(0), 0)
        self.assertEqual(self.buffer.line_start(1), 3)
        self.assertEqual(self.buffer.char_offset(1, 2), 5)
        self.assertEqual(self.buffer.char_count(), 5)

    def test_offset_to_position(self):
        self.assertEqual(self.buffer.offset_to_position(0), (0, 0))
        self.assertEqual(self.buffer.offset_to_position(2), (0, 2))
        self.assertEqual(self.buffer.offset_to_position(3), (1, 0))
        self.assertEqual(self.buffer.offset_to_position(5), (1, 2))

    def test_out_of_range_access_fails_fast(self):
        with self.assertRaises(IndexError):
            self.buffer.line(2)
        with self.assertRaises(IndexError):
            self.buffer.char_offset(0, 3)
        with self.assertRaises(IndexError):
            self.buffer.offset_to_position(6)
        with self.assertRaises(ValueError):
            self.buffer.delete_range(3, 1)

    def test_insert_char(self):
        self.buffer.insert_char(1, "X")
        self.assertEqual(self.buffer.text(), "aXb\ncd")

    def test_insert_newline_splits_line(self):
        self.buffer.insert_newline(4)
        self.assertEqual(self.buffer.lines, ["ab", "c", "d"])
        self.buffer.insert_char(0, "\n")
        self.assertEqual(self.buffer.lines, ["", "ab", "c", "d"])

    def test_delete_range_across_line_boundary_joins_lines(self):
        self.buffer.delete_range(2, 3)
        self.assertEqual(self.buffer.lines, ["abcd"])

    def test_delete_range_multiple_lines(self):
        buffer = TextBuffer("one\ntwo\nthree")
        buffer.delete_range(2, 9)
        self.assertEqual(buffer.lines, ["onhree"])

    def test_insert_then_delete_restores_text(self):
        original = "héllo\n\nwörld\n"
        for offset in range(len(original) + 1):
            buffer = TextBuffer(original)
            buffer.insert_char(offset, "x")
            buffer.delete_range(offset, offset + 1)
            self.assertEqual(buffer.text(), original, f"offset {offset}")

    def test_line_starts_follow_edits(self):
        buffer = TextBuffer("\n".join("x" * (i % 7) for i in range(60)))
        rng = random.Random(3)
        for _ in range(300):
            self.assertEqual(buffer.line_start(buffer.line_count() - 1),
                             sum(len(line) + 1 for line in buffer.lines[:-1]))
            offset = rng.randint(0, buffer.char_count())
            action = rng.choice(("char", "newline", "delete"))
            if action == "char":
                buffer.insert_char(offset, "y")
            elif action == "newline":
                buffer.insert_newline(offset)
            elif offset < buffer.char_count():
                buffer.delete_range(offset, offset + 1)
            for index in (0, buffer.line_count() // 2, buffer.line_count() - 1):
                expected = sum(len(line) + 1 for line in buffer.lines[:index])
                self.assertEqual(buffer.line_start(index), expected)
                self.assertEqual(buffer.offset_to_position(expected), (index, 0))


class TestTextBufferFiles(unittest.TestCase):

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.path = os.path.join(self.tmpdir.name, "doc.txt")

    def tearDown(self):
        self.tmpdir.cleanup()

    def test_write_then_read_keeps_lines(self):
        buffer = TextBuffer("one\ntwo\n\nthree ü\n")
        buffer.write_to(self.path)
        reloaded = TextBuffer.read_from(self.path)
        self.assertEqual(reloaded.lines, buffer.lines)

    def test_write_overwrites_existing_file(self):
        with open(self.path, "w", encoding="utf-8") as fh:
            fh.write("a much longer previous content")
        TextBuffer("hi").write_to(self.path)
        with open(self.path, "rb") as fh:
            self.assertEqual(fh.read(), b"hi")

    def test_write_to_missing_directory_raises(self):
        missing = os.path.join(self.tmpdir.name, "nope", "doc.txt")
        with self.assertRaises(OSError):
            TextBuffer("hi").write_to(missing)

    def test_read_normalises_crlf(self):
        with open(self.path, "wb") as fh:
            fh.write(b"a\r\nb\r\n")
        self.assertEqual(TextBuffer.read_from(self.path).lines, ["a", "b", ""])

    def test_read_falls_back_to_latin1(self):
        with open(self.path, "wb") as fh:
            fh.write(b"caf\xe9")
        buffer = TextBuffer.read_from(self.path, detect_encoding=False)
        self.assertEqual(buffer.line(0), "café")
        self.assertEqual(buffer.encoding, "latin-1")

    def test_ascii_file_is_edited_as_utf8(self):
        with open(self.path, "wb") as fh:
            fh.write(b"plain ascii text\n")
        buffer = TextBuffer.read_from(self.path)
        self.assertEqual(buffer.encoding, "utf-8")

    def test_read_missing_file_raises(self):
        with self.assertRaises(OSError):
            TextBuffer.read_from(os.path.join(self.tmpdir.name, "absent.txt"))


if __name__ == '__main__':
    unittest.main()

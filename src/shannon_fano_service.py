# filename: shannon_fano_service.py

import argparse
import json
import sys

from shannon_fano_core import ShannonFanoLogic

EXAMPLES = {
    "shannon-fano": "shannon-fano",
    "aabc": "aabc",
    "hello world": "hello world",
    "mississippi": "mississippi",
    "compression": "compression",
}

EMPTY_INPUT_MESSAGE = "Please enter some text to compress."


class EmptyInputError(ValueError):
    def __init__(self, message=EMPTY_INPUT_MESSAGE):
        super().__init__(message)


class CompressionResult:
    def __init__(self, text, frequencies, sorted_chars, history, codebook, encoded, statistics, tree):
        self.text = text
        self.frequencies = frequencies
        self.sorted_chars = sorted_chars
        self.history = history
        self.codebook = codebook
        self.encoded = encoded
        self.statistics = statistics
        self.tree = tree

    def to_dict(self):
        return {
            "text": self.text,
            "frequencies": self.frequencies,
            "sortedChars": self.sorted_chars,
            "codebook": self.codebook,
            "encoded": self.encoded,
            "statistics": self.statistics.to_dict(),
            "tree": self.tree.to_dict() if self.tree is not None else None,
        }


class ShannonFanoService:
    def __init__(self):
        self.logic = ShannonFanoLogic()

    def validate(self, text):
        if not text or not text.strip():
            raise EmptyInputError()
        return text

    def compress(self, text):
        self.validate(text)
        freqs = self.logic.count_frequencies(text)

        # A lone symbol gets a fixed one-bit code instead of the empty root prefix
        if len(freqs) == 1:
            char = next(iter(freqs))
            codebook = {char: "0"}
            return CompressionResult(
                text, freqs, [char], [], codebook, "0" * len(text),
                self.logic.compute_statistics(text, codebook), None,
            )

        sorted_chars = self.logic.sort_by_frequency_desc(freqs)
        history = self.logic.build_partition_history(sorted_chars, freqs)
        codebook = self.logic.build_codebook(history)
        encoded = self.logic.encode(text, codebook)
        return CompressionResult(
            text, freqs, sorted_chars, history, codebook, encoded,
            self.logic.compute_statistics(text, codebook),
            self.logic.materialize_tree(history),
        )

    def decompress(self, encoded, codebook):
        return self.logic.decode(encoded, codebook)


def format_report(result):
    lines = [f"Input: {result.text!r}", "", "Char  Freq  Code"]
    for char in result.sorted_chars:
        lines.append(f"{char!r:<5} {result.frequencies[char]:>4}  {result.codebook[char]}")
    stats = result.statistics
    lines += [
        "",
        f"Encoded: {result.encoded}",
        f"Original size: {stats.original_size} bits",
        f"Compressed size: {stats.compressed_size} bits",
        f"Compression ratio: {stats.compression_ratio:.2f}%",
        f"Average code length: {stats.average_code_length:.2f} bits/char",
    ]
    return "\n".join(lines)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Shannon-Fano encode a piece of text")
    parser.add_argument("text", nargs="?", default=None, help="Text to encode")
    parser.add_argument(
        "--example",
        choices=sorted(EXAMPLES),
        default=None,
        help="Use one of the bundled example inputs instead of TEXT",
    )
    parser.add_argument("--json", action="store_true", help="Print the result as JSON")
    args = parser.parse_args(argv)

    text = EXAMPLES[args.example] if args.example else args.text
    service = ShannonFanoService()
    try:
        result = service.compress(text or "")
    except EmptyInputError as e:
        print(f"❌ {e}")
        return 1

    if args.json:
        print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    else:
        print(format_report(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())

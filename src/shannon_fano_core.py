# filename: shannon_fano_core.py

from collections import Counter

BITS_PER_CHARACTER = 8


class CodebookMismatchError(KeyError):
    """A character of the text has no entry in the codebook."""

    def __init__(self, char):
        super().__init__(char)
        self.char = char

    def __str__(self):
        return f"no code for character {self.char!r}; codebook was built from different text"


class DecodeError(ValueError):
    pass


class PartitionState:
    def __init__(self, characters, frequencies, depth, prefix, parent_index=None):
        self.characters = list(characters)
        self.frequencies = list(frequencies)
        self.total_frequency = sum(self.frequencies)
        self.depth = depth
        self.prefix = prefix
        self.parent_index = parent_index
        self.child_indices = (None, None)
        self.split_index = None
        self.left_sum = None
        self.right_sum = None

    @property
    def is_leaf(self):
        return len(self.characters) == 1

    def __repr__(self):
        return (
            f"PartitionState(characters={self.characters!r}, depth={self.depth}, "
            f"prefix={self.prefix!r}, split_index={self.split_index})"
        )


class TreeNode:
    def __init__(self, id, name, value, code=None, split_index=None, left_sum=None, right_sum=None):
        self.id = id
        self.name = name
        self.value = value
        self.code = code
        self.split_index = split_index
        self.left_sum = left_sum
        self.right_sum = right_sum
        self.children = []

    def to_dict(self):
        out = {"id": self.id, "name": self.name, "value": self.value}
        if self.code is not None:
            out["code"] = self.code
        else:
            out["splitIndex"] = self.split_index
            out["leftSum"] = self.left_sum
            out["rightSum"] = self.right_sum
        out["children"] = [child.to_dict() for child in self.children]
        return out


class Statistics:
    def __init__(self, original_size, compressed_size, compression_ratio, average_code_length):
        self.original_size = original_size
        self.compressed_size = compressed_size
        self.compression_ratio = compression_ratio
        self.average_code_length = average_code_length

    def to_dict(self):
        return {
            "originalSize": self.original_size,
            "compressedSize": self.compressed_size,
            "compressionRatio": self.compression_ratio,
            "averageCodeLength": self.average_code_length,
        }

    def __eq__(self, other):
        if not isinstance(other, Statistics):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Statistics({self.to_dict()!r})"


class ShannonFanoLogic:
    """Stateless Shannon-Fano pipeline stages.

    Each method takes the previous stage's output; nothing is cached on the
    instance, so one object can be shared freely.
    """

    def count_frequencies(self, text):
        return dict(Counter(text))

    def sort_by_frequency_desc(self, freqs):
        # Ties fall back to ascending character order
        return sorted(freqs, key=lambda char: (-freqs[char], char))

    def build_partition_history(self, sorted_chars, freqs):
        """Split the sorted characters recursively and record every partition.

        The history is a flat list in pre-order (node, left subtree, right
        subtree). Parent and child links are indices into that list.
        """
        history = []
        if not sorted_chars:
            return history

        def partition(chars, depth, prefix, parent_index):
            state = PartitionState(chars, [freqs[c] for c in chars], depth, prefix, parent_index)
            index = len(history)
            history.append(state)
            if state.is_leaf:
                return index

            split_index = 0
            best_diff = None
            left_sum = 0
            for i in range(len(chars) - 1):
                left_sum += state.frequencies[i]
                diff = abs(left_sum - (state.total_frequency - left_sum))
                if best_diff is None or diff < best_diff:
                    best_diff = diff
                    split_index = i

            left_chars = chars[:split_index + 1]
            right_chars = chars[split_index + 1:]
            assert left_chars and right_chars, "partition split produced an empty side"

            state.split_index = split_index
            state.left_sum = sum(state.frequencies[:split_index + 1])
            state.right_sum = state.total_frequency - state.left_sum

            left_index = partition(left_chars, depth + 1, prefix + "0", index)
            right_index = partition(right_chars, depth + 1, prefix + "1", index)
            state.child_indices = (left_index, right_index)
            return index

        partition(list(sorted_chars), 0, "", None)
        return history

    def build_codebook(self, history):
        return {state.characters[0]: state.prefix for state in history if state.is_leaf}

    def encode(self, text, codebook):
        try:
            return "".join([codebook[char] for char in text])
        except KeyError as e:
            raise CodebookMismatchError(e.args[0]) from None

    def decode(self, bits, codebook):
        """Invert ``encode``. Codes are prefix-free, so the first match wins."""
        lookup = {code: char for char, code in codebook.items()}
        out = []
        current = ""
        for bit in bits:
            if bit not in "01":
                raise DecodeError(f"invalid bit {bit!r} in encoded string")
            current += bit
            if current in lookup:
                out.append(lookup[current])
                current = ""
        if current:
            raise DecodeError(f"encoded string ends inside a code: trailing {current!r}")
        return "".join(out)

    def compute_statistics(self, text, codebook):
        original_size = len(text) * BITS_PER_CHARACTER
        compressed_size = 0
        for char in text:
            if char not in codebook:
                raise CodebookMismatchError(char)
            compressed_size += len(codebook[char])
        ratio = (1 - compressed_size / original_size) * 100 if original_size > 0 else 0
        average = compressed_size / len(text) if text else 0
        return Statistics(original_size, compressed_size, ratio, average)

    def materialize_tree(self, history):
        if not history:
            return None

        seen = set()

        def build_node(index):
            seen.add(index)
            state = history[index]
            if state.is_leaf:
                return TreeNode(f"node-{index}", state.characters[0], state.frequencies[0], code=state.prefix)

            node = TreeNode(
                f"node-{index}",
                ", ".join(state.characters),
                state.total_frequency,
                split_index=state.split_index,
                left_sum=state.left_sum,
                right_sum=state.right_sum,
            )
            for child in state.child_indices:
                # Dangling or missing indices are skipped
                if isinstance(child, int) and 0 <= child < len(history) and child not in seen:
                    node.children.append(build_node(child))
            return node

        return build_node(0)

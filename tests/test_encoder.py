"""Unit tests for BytePairEncoder tokenization shapes, markers and laziness."""

import pytest

from bpetok import BytePairEncoder, SentenceStream, TokenStream
from bpetok.errors import DuplicateEntryError, MalformedRecordError, StrategyError


# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def hello_encoder():
    """Return an encoder knowing two whole words."""
    return BytePairEncoder.from_str("▁hello\t1\n▁world\t2")


@pytest.fixture
def sentence_encoder():
    """Return an encoder covering a few short English sentences."""
    vocab = "\n".join(
        f"▁{word}\t{rank}"
        for rank, word in enumerate(
            ["this", "is", "a", "test", "sentence", "and", "one", "two"], start=1
        )
    )
    return BytePairEncoder.from_str(vocab)


@pytest.fixture
def piece_encoder():
    """Return an encoder whose vocabulary holds the bare word break and word pieces."""
    return BytePairEncoder.from_str("hello\t1\nworld\t2\n▁\t3")


TEXTS = [
    "",
    "   ",
    "Hello, world!",
    "Hello, world! How are you?",
    "This is sentence one. And this is sentence two.",
    "こんにちは、世界！お元気ですか？",
    "...\n\nHello\n\n!!!",
]


# Concrete scenarios
# ---------------------------------------------------------------------------


def test_punctuation_is_dropped(hello_encoder):
    """Punctuation never reaches the vocabulary."""
    assert hello_encoder.tokenize("Hello, world!") == ["<s>", "▁hello", "▁world", "</s>"]


def test_single_sentence(sentence_encoder):
    """Each word maps to its word-initial subword inside one sentence."""
    assert sentence_encoder.tokenize("This is a test sentence.") == [
        "<s>",
        "▁this",
        "▁is",
        "▁a",
        "▁test",
        "▁sentence",
        "</s>",
    ]


def test_two_sentences(sentence_encoder):
    """Each sentence is bounded by its own markers."""
    text = "This is sentence one. And this is sentence two."
    assert sentence_encoder.tokenize_sentences(text) == [
        ["<s>", "▁this", "▁is", "▁sentence", "▁one", "</s>"],
        ["<s>", "▁and", "▁this", "▁is", "▁sentence", "▁two", "</s>"],
    ]


def test_unknown_word(hello_encoder):
    """A word absent from the vocabulary is one unknown token per character."""
    # "▁zzz": the glyph and each letter are uncovered
    assert hello_encoder.tokenize("zzz") == ["<s>"] + ["<unk>"] * 4 + ["</s>"]


def test_unknown_word_collapsed():
    """Collapsing gives one unknown token for the whole word."""
    encoder = BytePairEncoder.from_str("▁hello\t1", collapse_unknown=True)
    assert encoder.tokenize("zzz") == ["<s>", "<unk>", "</s>"]


def test_empty_input(hello_encoder):
    """Empty text gives no tokens and no markers in every shape."""
    assert hello_encoder.tokenize("") == []
    assert hello_encoder.tokenize_sentences("") == []
    assert list(hello_encoder.tokenize_iter("")) == []
    assert list(hello_encoder.tokenize_sentences_iter("")) == []


@pytest.mark.parametrize("text", ["   ", "\n\t \n", "!!! ?", "...  --  ..."])
def test_wordless_input(hello_encoder, text):
    """Whitespace or punctuation alone produces no sentences and no empty words."""
    assert hello_encoder.tokenize(text) == []
    assert hello_encoder.tokenize_sentences(text) == []


def test_wordless_sentences_are_skipped(hello_encoder):
    """Sentences without words between real sentences leave no trace."""
    assert hello_encoder.tokenize_sentences("Hello! ... World.") == [
        ["<s>", "▁hello", "</s>"],
        ["<s>", "▁world", "</s>"],
    ]


# Word break marking
# ---------------------------------------------------------------------------


def test_word_break_as_separate_piece(piece_encoder):
    """A bare word break entry splits off ahead of the word; unknown words fall back."""
    assert piece_encoder.tokenize_sentences("Hello, world! How are you?") == [
        ["<s>", "▁", "hello", "▁", "world", "</s>"],
        ["<s>", "▁", *["<unk>"] * 3, "▁", *["<unk>"] * 3, "▁", *["<unk>"] * 3, "</s>"],
    ]


def test_word_break_collapsed_unknowns():
    """With collapsing, each unknown word is the word break plus one unknown token."""
    encoder = BytePairEncoder.from_str("hello\t1\nworld\t2\n▁\t3", collapse_unknown=True)
    assert encoder.tokenize("Hello, world! How are you?") == [
        "<s>",
        "▁",
        "hello",
        "▁",
        "world",
        "</s>",
        "<s>",
        "▁",
        "<unk>",
        "▁",
        "<unk>",
        "▁",
        "<unk>",
        "</s>",
    ]


def test_unicode_words():
    """Kana and ideographs are tokenized per character word."""
    encoder = BytePairEncoder.from_str(
        "こんにちは\t1\n世界\t2\n▁\t3", collapse_unknown=True
    )
    sentences = encoder.tokenize_sentences("こんにちは、世界！お元気ですか？")
    assert len(sentences) == 2
    assert sentences[0] == ["<s>"] + ["▁", "<unk>"] * 7 + ["</s>"]
    assert sentences[1] == ["<s>"] + ["▁", "<unk>"] * 6 + ["</s>"]


def test_continuation_pieces_have_no_word_break():
    """Only the first piece of a word carries the word break."""
    encoder = BytePairEncoder.from_str("▁un\t1\nbreak\t2\nable\t3")
    assert encoder.tokenize("Unbreakable") == ["<s>", "▁un", "break", "able", "</s>"]


def test_tokenize_word(hello_encoder):
    """Single words are lowercased and marked before decomposition."""
    assert hello_encoder.tokenize_word("HELLO") == ["▁hello"]


# Options
# ---------------------------------------------------------------------------


def test_best_match_decomposer():
    """The best-match strategy can be chosen per encoder."""
    vocab = "▁\t9\nab\t1\nbc\t0\na\t2\nc\t4"
    greedy = BytePairEncoder.from_str(vocab)
    best = BytePairEncoder.from_str(vocab, decomposer="best-match")
    assert greedy.tokenize("abc") == ["<s>", "▁", "ab", "c", "</s>"]
    assert best.tokenize("abc") == ["<s>", "▁", "a", "bc", "</s>"]


def test_unknown_options_raise():
    """Unknown strategy and normalization names fail at construction."""
    with pytest.raises(StrategyError):
        BytePairEncoder.from_str("a\t1", decomposer="viterbi")
    with pytest.raises(StrategyError):
        BytePairEncoder.from_str("a\t1", normalization="upper")


def test_from_file(tmp_path):
    """Encoders can be loaded from vocabulary files."""
    path = tmp_path / "en.vocab"
    path.write_text("▁hello\t1\n▁world\t2\n", encoding="utf-8")
    encoder = BytePairEncoder.from_file(path)
    assert encoder.tokenize("hello world") == ["<s>", "▁hello", "▁world", "</s>"]


def test_from_file_signed_scores(tmp_path):
    """Score files are read through the encoder when signed scores are requested."""
    path = tmp_path / "en.wiki.bpe.vocab"
    path.write_text("▁the\t-4\n▁cat\t-7\n", encoding="utf-8")
    encoder = BytePairEncoder.from_file(path, signed_scores=True, collapse_unknown=True)
    assert encoder.vocab.lookup("▁cat") == 7
    assert encoder.tokenize("The cat") == ["<s>", "▁the", "▁cat", "</s>"]
    with pytest.raises(MalformedRecordError):
        BytePairEncoder.from_file(path)


def test_from_str_strict():
    """Strict loading rejects repeated subwords; the default keeps the last rank."""
    text = "▁hello\t1\n▁hello\t2"
    assert BytePairEncoder.from_str(text).vocab.lookup("▁hello") == 2
    with pytest.raises(DuplicateEntryError):
        BytePairEncoder.from_str(text, strict=True)


# Markers and equivalence
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("text", TEXTS)
def test_sentence_markers(piece_encoder, text):
    """Every sentence starts with <s>, ends with </s> and holds neither inside."""
    for sentence in piece_encoder.tokenize_sentences(text):
        assert sentence[0] == "<s>"
        assert sentence[-1] == "</s>"
        assert "<s>" not in sentence[1:-1]
        assert "</s>" not in sentence[1:-1]
        assert len(sentence) > 2


@pytest.mark.parametrize("text", TEXTS)
def test_lazy_matches_eager(piece_encoder, text):
    """Lazy and eager variants produce the same tokens."""
    flat = piece_encoder.tokenize(text)
    nested = piece_encoder.tokenize_sentences(text)

    assert list(piece_encoder.tokenize_iter(text)) == flat
    assert [list(s) for s in piece_encoder.tokenize_sentences_iter(text)] == nested
    assert [tok for sentence in nested for tok in sentence] == flat


# Laziness
# ---------------------------------------------------------------------------


def test_tokenize_iter_is_lazy(hello_encoder, monkeypatch):
    """Words are only decomposed when their tokens are pulled."""
    calls: list[str] = []
    tokenize_word = hello_encoder.tokenize_word

    def counting(word):
        calls.append(word)
        return tokenize_word(word)

    monkeypatch.setattr(hello_encoder, "tokenize_word", counting)

    stream = hello_encoder.tokenize_iter("Hello world. Hello again. World hello.")
    assert isinstance(stream, TokenStream)
    assert calls == []

    assert next(stream) == "<s>"
    assert calls == []
    assert next(stream) == "▁hello"
    assert calls == ["Hello"]


def test_tokenize_sentences_iter_is_lazy(hello_encoder, monkeypatch):
    """Later sentences are untouched until their stream is pulled."""
    calls: list[str] = []
    tokenize_word = hello_encoder.tokenize_word

    def counting(word):
        calls.append(word)
        return tokenize_word(word)

    monkeypatch.setattr(hello_encoder, "tokenize_word", counting)

    sentences = hello_encoder.tokenize_sentences_iter("Hello world. World hello.")
    assert isinstance(sentences, SentenceStream)
    first = next(sentences)
    assert list(first) == ["<s>", "▁hello", "▁world", "</s>"]
    assert calls == ["Hello", "world"]


def test_streams_are_single_pass(hello_encoder):
    """An exhausted stream stays exhausted."""
    stream = hello_encoder.tokenize_iter("Hello world.")
    assert iter(stream) is stream
    assert list(stream) == ["<s>", "▁hello", "▁world", "</s>"]
    assert list(stream) == []
    with pytest.raises(StopIteration):
        next(stream)


# Batch
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("num_workers", [None, 0, 1, 4])
def test_tokenize_batch(piece_encoder, num_workers):
    """Batch results match single-text results in input order."""
    texts = TEXTS * 3
    assert piece_encoder.tokenize_batch(texts, num_workers=num_workers) == [
        piece_encoder.tokenize(text) for text in texts
    ]


def test_tokenize_batch_empty(piece_encoder):
    """An empty batch gives an empty result."""
    assert piece_encoder.tokenize_batch([]) == []

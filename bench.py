"""Benchmark tokenize() and tokenize_iter() on a slice of the Sci-Fi Gutenberg dataset.

Outputs a row with the columns:
  Corpus Size | Vocab Size | Load Time | Eager Throughput |
  Lazy Throughput | Tokens | Unknown Rate
"""

import argparse
import logging
import time
from pathlib import Path

from datasets import load_dataset

from bpetok import UNKNOWN_TOKEN, BytePairEncoder, list_decomposers, list_defaults

HF_DATASET = "stevez80/Sci-Fi-Books-gutenberg"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%H:%M:%S",
)


def load_corpus(num_docs: int | None) -> list[str]:
    """Load up to `num_docs` documents via dataset indexing; full dataset when None."""
    print(f"Loading {HF_DATASET} (non-streaming) …")
    ds = load_dataset(HF_DATASET, split="train")
    if num_docs is not None:
        return ds[:num_docs]["text"]
    return ds["text"]


def load_encoder(
    vocab_path: Path | None, default: str, decomposer: str, signed_scores: bool = False
) -> tuple[BytePairEncoder, float]:
    """Return (encoder, load_seconds) from a vocabulary file or a default vocabulary."""
    start = time.perf_counter()
    if vocab_path is not None:
        encoder = BytePairEncoder.from_file(
            vocab_path, signed_scores=signed_scores, decomposer=decomposer
        )
    else:
        encoder = BytePairEncoder.from_pretrained(default, decomposer=decomposer)
    return encoder, time.perf_counter() - start


def main() -> None:
    """Run the tokenization benchmark and print a table row."""
    parser = argparse.ArgumentParser(
        description="Benchmark bpetok tokenize() and tokenize_iter()."
    )
    parser.add_argument(
        "--num-docs",
        type=int,
        default=100,
        help="Number of documents to tokenize (default: 100).",
    )
    parser.add_argument(
        "--vocab",
        type=str,
        default=None,
        help="Optional <subword>\\t<rank> vocabulary file; default uses --default.",
    )
    parser.add_argument(
        "--signed-scores",
        action="store_true",
        help="Read --vocab as a BPEmb file of scores (<= 0) instead of ranks.",
    )
    parser.add_argument(
        "--default",
        choices=list_defaults(),
        default="small",
        help="Default vocabulary size when --vocab is not given (default: small).",
    )
    parser.add_argument(
        "--decomposer",
        choices=list_decomposers(),
        default="greedy",
        help="Word decomposition strategy (default: greedy).",
    )
    args = parser.parse_args()

    docs = load_corpus(args.num_docs)
    if not docs:
        raise RuntimeError("No documents loaded from dataset.")

    total_bytes = sum(len(d.encode("utf-8")) for d in docs)
    corpus_mb = total_bytes / (1024 * 1024)

    vocab_path = Path(args.vocab) if args.vocab else None
    encoder, load_secs = load_encoder(
        vocab_path, args.default, args.decomposer, args.signed_scores
    )

    # --- Eager ---
    t0 = time.perf_counter()
    tokenized = [encoder.tokenize(doc) for doc in docs]
    eager_elapsed = time.perf_counter() - t0
    eager_mbps = total_bytes / eager_elapsed / (1024 * 1024)

    # --- Lazy ---
    t0 = time.perf_counter()
    lazy_count = sum(1 for doc in docs for _ in encoder.tokenize_iter(doc))
    lazy_elapsed = time.perf_counter() - t0
    lazy_mbps = total_bytes / lazy_elapsed / (1024 * 1024)

    total_tokens = sum(len(seq) for seq in tokenized)
    if lazy_count != total_tokens:
        raise RuntimeError(f"lazy/eager mismatch: {lazy_count} != {total_tokens}")
    n_unknown = sum(seq.count(UNKNOWN_TOKEN) for seq in tokenized)
    unknown_rate = n_unknown / total_tokens * 100 if total_tokens else 0.0

    # --- Output ---
    print()
    header = (
        f"| {'Corpus Size':14} | {'Vocab Size':10} | {'Load Time':10} "
        f"| {'Eager Throughput':16} | {'Lazy Throughput':16} "
        f"| {'Tokens':12} | {'Unknown Rate':12} |"
    )
    sep = (
        f"| {'-' * 14} | {'-' * 10} | {'-' * 10} "
        f"| {'-' * 16} | {'-' * 16} "
        f"| {'-' * 12} | {'-' * 12} |"
    )
    row = (
        f"| {f'{corpus_mb:.2f} MB':14} | {len(encoder.vocab):10,} | {f'{load_secs:.1f} secs':10} "
        f"| {f'{eager_mbps:.2f} MB/sec':16} | {f'{lazy_mbps:.2f} MB/sec':16} "
        f"| {total_tokens:12,} | {f'{unknown_rate:.2f}%':12} |"
    )
    print(header)
    print(sep)
    print(row)
    print()


if __name__ == "__main__":
    main()

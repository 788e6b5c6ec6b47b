import sys
import time
import logging
import argparse
from collections import namedtuple

from indexer import InvertedIndex, DuplicateDocumentIdError, build_inverted_index
from query_processor import parse_query

log = logging.getLogger(__name__)

# --- CONFIGURATION ---
MAX_RESULT_DOCUMENT_COUNT = 5

ScoredDocument = namedtuple('ScoredDocument', ['document_id', 'relevance'])


class InputFormatError(ValueError):
    """The console input does not follow the stop words / count / documents / query layout."""


def find_all_documents(index, query):
    """
    Scores every document sharing at least one plus word with the query,
    then drops the ones containing any minus word
    """
    relevance = {}

    # Only walk the postings of each plus word, never the whole corpus.
    # Sorted so every run adds the tf * idf terms in the same order
    for word in sorted(query.plus_words):
        postings = index.postings(word)
        if not postings:
            continue
        idf = index.inverse_document_frequency(word)
        for doc_id, tf in postings.items():
            relevance[doc_id] = relevance.get(doc_id, 0.0) + tf * idf

    #Every document holding a minus word is out, however relevant it is
    excluded = set()
    for word in query.minus_words:
        excluded.update(index.postings(word).keys())

    return [ScoredDocument(doc_id, score)
            for doc_id, score in relevance.items()
            if doc_id not in excluded]


def rank_documents(scored_documents, limit=MAX_RESULT_DOCUMENT_COUNT):
    # Highest relevance first, ties go to the lower document id
    ranked = sorted(scored_documents, key=lambda doc: (-doc.relevance, doc.document_id))
    return ranked[:limit]


def find_top_documents(index, raw_query, limit=MAX_RESULT_DOCUMENT_COUNT):
    query = parse_query(raw_query)
    return rank_documents(find_all_documents(index, query), limit)


def format_result(document):
    return f"{{ document_id = {document.document_id}, relevance = {document.relevance} }}"


def create_search_index(lines):
    """
    Reads the console layout from an iterable of lines:
        stop words
        document count N
        N document lines
        query
    Returns (index, query)
    """
    lines = (line.rstrip('\r\n') for line in lines)

    stop_words = next(lines, None)
    if stop_words is None:
        raise InputFormatError("missing stop words line")
    index = InvertedIndex(stop_words)

    count_line = next(lines, None)
    if count_line is None:
        raise InputFormatError("missing document count line")
    try:
        document_count = int(count_line.strip())
    except ValueError:
        raise InputFormatError(f"document count is not an integer: {count_line!r}") from None
    if document_count < 0:
        raise InputFormatError(f"document count must not be negative: {document_count}")

    for document_id in range(document_count):
        text = next(lines, None)
        if text is None:
            raise InputFormatError(f"expected {document_count} documents, got {document_id}")
        index.add_document(text, document_id)

    query = next(lines, None)
    if query is None:
        raise InputFormatError("missing query line")
    return index, query


def run_batch(stream):
    index, query = create_search_index(stream)
    for document in find_top_documents(index, query):
        print(format_result(document))


def run_interactive(corpus_dir, stop_words):
    print("Loading corpus into memory...")
    index, doc_map = build_inverted_index(corpus_dir, stop_words)
    if not len(index):
        print(f"Error: no documents found under '{corpus_dir}'")
        return

    print("\nSearch Engine Ready (Type 'quit' to exit)")
    while True:
        try:
            user_query = input("\nEnter search query: ")
        except EOFError:
            break
        if user_query.lower() == 'quit':
            break

        # Start the stopwatch
        start_time = time.time()
        results = find_top_documents(index, user_query)
        elapsed_ms = (time.time() - start_time) * 1000
        log.debug("Query %r matched %d documents in %.2f ms", user_query, len(results), elapsed_ms)

        print(f"\n--- Search Results ---")
        print(f"Found {len(results)} documents in {elapsed_ms:.2f} ms")
        for i, document in enumerate(results):
            url = doc_map.get(document.document_id, "URL not found")
            print(f"{i + 1}. {url} (relevance {document.relevance:.4f})")
        print("-" * 35)


def main(argv=None):
    parser = argparse.ArgumentParser(description="TF-IDF search with stop words and minus words")
    parser.add_argument("--corpus", help="Directory of JSON pages to search interactively instead of reading stdin")
    parser.add_argument("--stop-words", default="", help="Space separated stop words for --corpus mode")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    try:
        if args.corpus:
            run_interactive(args.corpus, args.stop_words)
        else:
            run_batch(sys.stdin)
    except (InputFormatError, DuplicateDocumentIdError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


# Main ui
if __name__ == "__main__":
    sys.exit(main())

import os
import json
import math
import logging
from types import MappingProxyType

from bs4 import BeautifulSoup as bs
from tokenizer import tokenize

# This simply ignores the warning about parsing XML documents
# "XMLParsedAsHTMLWarning: It looks like you're using an HTML parser to parse an XML document."
# This is harmless and we can keep treating these files as HTML
from bs4 import XMLParsedAsHTMLWarning
import warnings
warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

log = logging.getLogger(__name__)

#CONFIGURATION
DEV_DIR = os.path.join('developer', 'DEV') #Default path to the page corpus
PROGRESS_INTERVAL = 1000 # How many documents to process between progress messages

_EMPTY_POSTINGS = MappingProxyType({})


class DuplicateDocumentIdError(ValueError):
    """Raised when a document id is added to the index a second time."""

    def __init__(self, document_id):
        super().__init__(f"document id {document_id} has already been added")
        self.document_id = document_id


class InvertedIndex:
    """
    In-memory TF-IDF index.

    Only statistics survive ingestion, the document text itself is dropped:
        word -> { doc_id: term frequency }
        doc_id -> number of non-stop words (document size)
    Documents are append-only, nothing is ever updated or removed.
    """

    def __init__(self, stop_words=''):
        self.stop_words = set()
        self.document_count = 0
        self.unique_tokens = set() #Set for tracking every token seen, stop words included
        self._index = {} # Structure: { "word": { doc_id_1: tf, doc_id_2: tf } }
        self._document_sizes = {}
        self._next_id = 0
        if stop_words:
            self.set_stop_words(stop_words)

    def set_stop_words(self, text):
        """Add every word of text to the stop words. Later calls extend the set, they never replace it."""
        if self.document_count:
            log.warning("Stop words changed after %d documents were indexed; existing postings are kept",
                        self.document_count)
        self.stop_words.update(tokenize(text))

    def is_stop_word(self, word):
        return word in self.stop_words

    def split_into_words_no_stop(self, text):
        return [word for word in tokenize(text, self.unique_tokens) if word and not self.is_stop_word(word)]

    def add_document(self, text, document_id=None):
        """
        Index one document and return its id.

        Without document_id the next sequential id is assigned. A caller
        supplied id must be a non-negative int that has not been seen yet.
        """
        document_id = self._claim_id(document_id)

        words = self.split_into_words_no_stop(text)
        self._document_sizes[document_id] = len(words)

        if words:
            # Each occurrence adds 1/size, which sums up to count/size
            inverse_size = 1.0 / len(words)
            for word in words:
                postings = self._index.setdefault(word, {})
                postings[document_id] = postings.get(document_id, 0.0) + inverse_size

        self.document_count += 1
        log.debug("Indexed document %d (%d words)", document_id, len(words))
        return document_id

    def _claim_id(self, document_id):
        if document_id is None:
            # Skip ids the caller already used explicitly
            while self._next_id in self._document_sizes:
                self._next_id += 1
            document_id = self._next_id
        elif isinstance(document_id, bool) or not isinstance(document_id, int):
            raise TypeError(f"document id must be an int, got {type(document_id).__name__}")
        elif document_id < 0:
            raise ValueError(f"document id must be non-negative, got {document_id}")
        elif document_id in self._document_sizes:
            raise DuplicateDocumentIdError(document_id)

        if document_id >= self._next_id:
            self._next_id = document_id + 1
        return document_id

    def postings(self, word):
        """Read-only { doc_id: tf } for word, empty when the word was never indexed."""
        postings = self._index.get(word)
        if postings is None:
            return _EMPTY_POSTINGS
        return MappingProxyType(postings)

    def term_frequency(self, document_id, word):
        return self._index.get(word, {}).get(document_id, 0.0)

    def document_frequency(self, word):
        return len(self._index.get(word, ()))

    def inverse_document_frequency(self, word):
        df = self.document_frequency(word)
        if df == 0:
            # Unknown words contribute nothing
            return 0.0
        assert df <= self.document_count, f"document frequency of {word!r} exceeds document count"
        return math.log(self.document_count / df)

    def document_size(self, document_id):
        return self._document_sizes[document_id]

    @property
    def vocabulary_size(self):
        return len(self._index)

    def __contains__(self, document_id):
        return document_id in self._document_sizes

    def __len__(self):
        return self.document_count


def extract_text(content):
    # Parse HTML using bs and flatten all whitespace to single spaces
    soup = bs(content, 'lxml')
    return ' '.join(soup.get_text(' ').split())


def iter_corpus_pages(dev_dir=DEV_DIR):
    """
    Walks dev_dir for JSON page records ({"url": ..., "content": html})
    and yields (url, text) pairs in a stable, sorted order
    """
    for root, dirs, files in os.walk(dev_dir):
        dirs.sort()
        for file in sorted(files):
            if not file.endswith(".json"):
                continue
            file_path = os.path.join(root, file)

            try:
                # Read the JSON file
                with open(file_path, 'r', encoding='utf-8') as f:
                    data = json.load(f)
                url = data.get('url') or ''
                content = data.get('content') or ''
            except (OSError, ValueError, AttributeError) as e:
                log.warning("Skipping %s: %s", file_path, e)
                continue

            yield url, extract_text(content)


def build_inverted_index(dev_dir=DEV_DIR, stop_words=''):
    """Index every page under dev_dir, returns (index, doc_map) where doc_map maps doc_id -> url"""
    index = InvertedIndex(stop_words)
    doc_map = {}  # Maps our integer IDs back to the real URLs

    log.info("Starting indexing from '%s'", dev_dir)

    for url, text in iter_corpus_pages(dev_dir):
        doc_id = index.add_document(text)
        doc_map[doc_id] = url

        # Check progress every PROGRESS_INTERVAL docs
        if index.document_count % PROGRESS_INTERVAL == 0:
            log.info("Processed %d documents...", index.document_count)

    log.info("Indexing complete: %d documents, %d indexed words, %d unique tokens",
             index.document_count, index.vocabulary_size, len(index.unique_tokens))
    return index, doc_map

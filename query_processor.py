from collections import namedtuple

from tokenizer import tokenize

# --- CONFIGURATION ---
EXCLUSION_MARKER = '-'  # A query word starting with this is a minus word

# plus_words: words a document should contain, minus_words: words that exclude a document
Query = namedtuple('Query', ['plus_words', 'minus_words'])


def parse_query(raw_query):
    """
    Splits a raw query into its plus and minus words.
    Repeated words collapse, and a word that appears as a minus word
    anywhere in the query is never kept as a plus word
    """
    plus_words = set()
    minus_words = set()

    for word in tokenize(raw_query):
        if not word:
            continue

        if word.startswith(EXCLUSION_MARKER):
            # Strip exactly one marker, a lone "-" becomes the empty word
            minus_words.add(word[len(EXCLUSION_MARKER):])
        else:
            plus_words.add(word)

    #Exclusion wins over inclusion
    plus_words -= minus_words
    return Query(frozenset(plus_words), frozenset(minus_words))

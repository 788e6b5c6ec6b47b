from nltk.tokenize import SpaceTokenizer

# Initialize the tokenizer (splits on the space character only)
space_tokenizer = SpaceTokenizer()


class Tokens:
    """
    Lazy, restartable sequence of the words in a piece of text.
    Every iteration walks the text again, so it can be consumed more than once
    """

    def __init__(self, text, unique_tokens=None):
        self.text = text
        self.unique_tokens = unique_tokens

    def __iter__(self):
        for start, end in space_tokenizer.span_tokenize(self.text):
            # Runs of spaces produce empty spans, skip them
            if start == end:
                continue
            token = self.text[start:end]
            #Add any unique tokens to tracker
            if self.unique_tokens is not None:
                self.unique_tokens.add(token)
            yield token

    def __repr__(self):
        return f"Tokens({self.text!r})"


# Parses a string into whitespace separated tokens, optionally updating a set of unique tokens
def tokenize(text, unique_tokens=None):
    # Tokens are compared byte for byte: no lowercasing, stemming or punctuation stripping
    return Tokens(text, unique_tokens)

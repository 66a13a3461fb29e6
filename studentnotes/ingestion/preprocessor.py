"""Text preprocessing for note entries: hashtags, display text and query tokens."""

import re
import unicodedata
from typing import List, Tuple

from studentnotes.domain.models import Tag


class TextPreprocessor:
    """Extracts tags from raw entry text and produces the cleaned display text.

    Recognised tag shapes::

        #value
        #key=value
        #namespace:key
        #namespace:key=value
    """

    def __init__(self):
        self.hashtag = re.compile(r'\B#\w[\w\-:=,.]+')
        self.spaces = re.compile(r'\s\s+')
        # Letters and digits only, the same word boundaries as the FTS5 unicode61 tokenizer.
        self.words = re.compile(r'[^\W_]+')

    def clean_text(self, text: str) -> str:
        """Strip tags out of the text and normalise whitespace."""
        text = self.hashtag.sub(' ', text)
        text = self.spaces.sub(' ', text)
        return text.strip()

    def extract_tags(self, text: str) -> List[Tag]:
        """Return the tags found in the text, in order of appearance."""
        return [self.parse_tag(match) for match in self.hashtag.findall(text)]

    def parse_tag(self, raw: str) -> Tag:
        tag_id = raw[1:] if raw.startswith('#') else raw
        namespace, rest = self._split_pair(tag_id, ':')
        key, value = self._split_pair(rest, '=')
        return Tag(id=tag_id, namespace=namespace, key=key, value=value)

    def tokenize(self, text: str) -> List[str]:
        """Split text into lower-cased word tokens, Latin diacritics removed."""
        return self.words.findall("".join(self._fold(c) for c in text.lower()))

    @staticmethod
    def _fold(char: str) -> str:
        # Only accents over an ASCII letter are dropped, as unicode61 does for Latin script.
        base = unicodedata.normalize("NFD", char)
        if len(base) > 1 and base[0].isascii() and base[0].isalpha():
            return base[0]
        return char

    @staticmethod
    def _split_pair(text: str, separator: str) -> Tuple[str, str]:
        # Only an exact two-way split yields a prefix; anything else keeps the whole string.
        parts = text.split(separator)
        if len(parts) == 2:
            return parts[0], parts[1]
        return "", text

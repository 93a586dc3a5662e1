"""
Argsparser tokenizer: classify raw arguments in one forward pass.

Classification rules
- a dash-prefixed token is tentatively a FLAG; every leading dash is removed
  to form its name.
- a bare token right after a pending dash-prefixed token turns that token into
  an OPTION, becomes its value and is itself marked SKIP.
- a bare token with no pending predecessor is UNKNOWN (an orphan value).
- a dash-prefixed token following another pending one confirms the previous
  as a FLAG; at the end of input a pending token simply stays a FLAG.
- a token made only of dashes gets an empty name; the binder reports it.
- empty and whitespace-only tokens are bare tokens like any other: a value
  after a pending dash-prefixed token (so `-title ""` carries an empty text),
  an orphan otherwise.

The only correction ever made is to the immediately preceding token, so the
pass is linear and needs no lookahead. SKIP tokens are dropped from the
returned sequence; indices point at raw input positions (1-based).
"""
from collections.abc import Iterable
from enum import IntEnum


class Classification(IntEnum):
    UNKNOWN = 0
    SKIP    = 1
    FLAG    = 2
    OPTION  = 3


class ClassifiedToken:
    """
    one raw argument and what the tokenizer made of it.

    attributes
    - index: 1-based position in the raw input.
    - original: raw text as given.
    - dashed: whether the text started with a dash.
    - classification: Classification member.
    - name: dash-stripped, trimmed and lowercased text (meaningful for dashed tokens).
    - value: text attached to an OPTION, None otherwise.
    """
    __slots__ = ("index", "original", "dashed", "classification", "name", "value")

    def __init__(self, index, original, /, classification=Classification.UNKNOWN):
        self.index = index
        self.original = original
        self.dashed = original.startswith("-")
        self.classification = classification
        self.name = original.lstrip("-").strip().lower() if self.dashed else original.strip().lower()
        self.value = None

    def __eq__(self, other, /):
        if not isinstance(other, ClassifiedToken):
            return NotImplemented
        return all(getattr(self, slot) == getattr(other, slot) for slot in self.__slots__)

    __hash__ = None

    def __repr__(self):
        if self.classification is Classification.OPTION:
            return f"{self.index} ({self.classification.name.lower()}) => {self.original} = {self.value}"
        return f"{self.index} ({self.classification.name.lower()}) => {self.original}"


def tokenize(arguments, /):
    """
    classify raw arguments and return the finished tokens as a tuple.

    parameters
    - arguments: Iterable[str], the raw argument sequence.

    returns
    - tuple[ClassifiedToken, ...] in input order, SKIP tokens elided.

    raises
    - TypeError: when arguments is a plain string or holds non-string items.
    """
    if isinstance(arguments, str) or not isinstance(arguments, Iterable):
        raise TypeError("tokenize() argument must be an iterable of strings")

    tokens = []
    dashing = False  # last kept token was dash-prefixed and is still a tentative flag

    for index, argument in enumerate(arguments, start=1):
        if not isinstance(argument, str):
            raise TypeError("tokenize() argument must be an iterable of strings")
        token = ClassifiedToken(index, argument)

        if token.dashed:
            # a dashed predecessor took no value, so it stays a flag
            token.classification = Classification.FLAG
            dashing = True
        elif dashing:
            tokens[-1].classification = Classification.OPTION
            tokens[-1].value = token.original
            token.classification = Classification.SKIP
            dashing = False
        else:
            token.classification = Classification.UNKNOWN

        if token.classification is not Classification.SKIP:
            tokens.append(token)

    return tuple(tokens)


__all__ = (
    "Classification",
    "ClassifiedToken",
    "tokenize",
)

"""
Pull-based XML token source and the generic tag dispatch loop.

=============================================================================
TOKENS
=============================================================================

ElementTree's iterparse() already is a pull parser: it hands out
("start", element) and ("end", element) events as it reads the stream.
TagCursor wraps it so the rest of the package sees plain tokens:

    Token(event="start", name="layer", attrs=[("name", "Ground")], element)
    Token(event="end",   name="layer", attrs=[...],               element)

Names are local names: a namespace prefix ("{uri}layer") is dropped.

Character data is only complete on the "end" event, so elements whose
text matters (<data>) are read with read_text().

=============================================================================
DISPATCH
=============================================================================

parse_tag() is the single recursion primitive. Each constructor opens a
scope for its own element and registers one handler per child tag it
understands:

    parse_tag(cursor, "layer", {
        "data": on_data,
        "properties": on_properties,
    })

A handler receives the child's attributes and MUST consume the child up
to and including its end tag, usually by opening its own parse_tag()
scope or calling close_tag()/read_text().

Children nobody handles are skipped. Nesting depth is tracked for them,
so an unknown <layer> inside a <layer> cannot close the outer scope.

=============================================================================
"""

from typing import BinaryIO, Callable, Dict, Iterator, List, NamedTuple, Optional, Tuple
from xml.etree import ElementTree as ET
from xml.parsers.expat import errors as expat_errors

from .errors import PrematureEnd, TokenizerFailure

START = "start"
END = "end"

# expat reports a truncated document as "no element found"
_NO_ELEMENTS = expat_errors.codes[expat_errors.XML_ERROR_NO_ELEMENTS]

Handler = Callable[[List[Tuple[str, str]]], None]


def local_name(tag: str) -> str:
    """Strip an ElementTree "{namespace}" prefix."""
    return tag.rpartition("}")[2]


class Token(NamedTuple):
    event: str
    name: str
    attrs: List[Tuple[str, str]]
    element: ET.Element


class TagCursor:
    """
    Iterator of Tokens over one XML byte stream.

    The cursor does not own the stream; whoever opened it closes it.
    """

    def __init__(self, stream: BinaryIO):
        self._events: Iterator[Tuple[str, ET.Element]] = ET.iterparse(
            stream, events=(START, END))

    def __iter__(self):
        return self

    def __next__(self) -> Token:
        try:
            event, element = next(self._events)
        except ET.ParseError as e:
            if e.code == _NO_ELEMENTS:
                raise PrematureEnd(f"Document ended before we expected: {e}") from e
            raise TokenizerFailure(str(e)) from e

        attrs = [(local_name(key), value) for key, value in element.attrib.items()]
        return Token(event, local_name(element.tag), attrs, element)

    def next_token(self) -> Optional[Token]:
        """Next token, or None at end of document."""
        return next(self, None)

    def find_root(self, name: str) -> Token:
        """
        Advance to the first start tag called `name`.

        Raises PrematureEnd if the document ends before it appears.
        """
        for token in self:
            if token.event == START and token.name == name:
                return token
        raise PrematureEnd(f"Document ended before <{name}> was found")


def parse_tag(cursor: TagCursor, close: str, handlers: Dict[str, Handler]) -> None:
    """
    Consume tokens up to the end tag `close` of the current scope.

    Parameters:
    -----------
    cursor : TagCursor
        Positioned just after the start tag of the scope
    close : str
        Local name of the scope's element
    handlers : dict
        Child tag name -> callable(attrs). Exceptions propagate at once.

    Raises:
    -------
    PrematureEnd : if the document ends before the scope closes
    """
    depth = 0
    while True:
        token = cursor.next_token()
        if token is None:
            raise PrematureEnd(f"Document ended before </{close}>")

        if token.event == START:
            handler = handlers.get(token.name)
            if handler is not None:
                handler(token.attrs)
            else:
                depth += 1
        elif depth:
            depth -= 1
        elif token.name == close:
            return


def close_tag(cursor: TagCursor, name: str) -> None:
    """Consume an element whose children we do not care about."""
    parse_tag(cursor, name, {})


def read_text(cursor: TagCursor, name: str) -> str:
    """
    Consume an element and return its character data.

    Only the text before the first child element is returned, which is
    where Tiled writes csv and base64 payloads.
    """
    depth = 0
    while True:
        token = cursor.next_token()
        if token is None:
            raise PrematureEnd(f"Document ended before </{name}>")

        if token.event == START:
            depth += 1
        elif depth:
            depth -= 1
        elif token.name == name:
            return token.element.text or ""

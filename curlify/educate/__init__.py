from .errors import (
    DecodeError,
    EducateError,
    EndOfInput,
    NestingTooDeep,
    ParserBug,
    UnterminatedSpan,
)
from .main import (
    educate,
    educateStream,
)
from .parser import (
    TRIGGER_CHARS,
    Trigger,
    newContext,
    parseDocument,
    triggerFor,
    triggerTable,
)
from .stream import (
    BOF,
    DEFAULT_PARSE_CONFIG,
    Context,
    ParseConfig,
    Sink,
    Stream,
)

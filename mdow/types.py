from typing import Any
from collections.abc import Callable


# Type aliases for Python dictionaries
type LambdaEvent = dict[str, Any]
type LambdaContext = Any
type LambdaConfiguration = dict[str, Any]

# Paste id generator: (length, alphabet) -> paste id
type IdGenerator = Callable[[int, str], str]

"""Common literal values used across zendocs.

These constants keep class names and messages centralized so the renderer, the
sanitizer, and the tests agree on the DOM contract exposed to the UI layer.

Examples
--------
>>> from zendocs import _constants
>>> _constants.COPY_BUTTON_CLASS
'copy-button'
>>> _constants.DOCUMENT_PATH_TEMPLATE.format(product="rfid", path="overview.md")
'documentation/rfid/overview.md'
"""

ERROR_TITLE = "Error loading documentation content"
CODE_BLOCK_CLASS = "code-block"
COPY_BUTTON_CLASS = "copy-button"
CODE_HEADER_CLASS = "code-header"
CODE_LANGUAGE_CLASS = "code-language"
DIAGRAM_CLASS = "diagram"
HEADING_ANCHOR_CLASS = "heading-anchor"
INLINE_CODE_CLASS = "inline-code"
HIGHLIGHT_CSS_CLASS = "codehilite"
DEFAULT_DOCUMENT = "overview.md"
DOCUMENT_PATH_TEMPLATE = "documentation/{product}/{path}"
BOX_DRAWING_CHARS = "[\u2500-\u257f]"
CREATE_TABLE_KEYWORDS = r"CREATE[ \t]+TABLE\b"

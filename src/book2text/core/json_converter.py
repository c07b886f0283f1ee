"""Render a BookDocument as JSON."""

import json

from pydantic import BaseModel

from book2text.models.book import BookDocument
from book2text.models.options import ConversionOptions


def convert_to_json(document: BookDocument, options: ConversionOptions | None = None) -> str:
    """Serialize the document, optionally projected through options.filter.

    None-valued fields are omitted. Pretty output uses 2-space indentation.
    """
    options = options or ConversionOptions()

    data = document
    if options.filter is not None:
        data = options.filter(document)

    indent = 2 if options.pretty else None
    if isinstance(data, BaseModel):
        return data.model_dump_json(indent=indent, exclude_none=True)

    # Filters may project to plain dicts/lists
    separators = None if options.pretty else (",", ":")
    return json.dumps(data, indent=indent, separators=separators, ensure_ascii=False)

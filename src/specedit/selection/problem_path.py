"""Map dotted problem paths onto editor selections.

Validators report locations as dotted strings such as
``paths./users.get.responses.200`` or ``components.schemas.User``. This
module turns them into a :class:`~specedit.models.Selection` so a click on
a problem can focus the matching editor. It only inspects the first three
segments; anything it does not recognise maps to a ``none`` selection that
keeps the original string in ``context["rawPath"]``. It never raises.
"""

from __future__ import annotations

from typing import Optional

from specedit.models import Selection, SelectionType


def parse_problem_path(path: Optional[str]) -> Selection:
    """Return the selection that best matches *path*.

    Examples:
        >>> parse_problem_path("paths./users.get").type
        <SelectionType.OPERATION: 'operation'>
        >>> parse_problem_path("servers.0").context
        {'rawPath': 'servers.0'}
    """
    if not path:
        return Selection(type=SelectionType.NONE)

    parts = path.split(".")
    head = parts[0]

    if head == "info":
        return Selection(type=SelectionType.INFO, context={"field": ".".join(parts[1:])})

    if head == "paths" and len(parts) >= 2:
        name = parts[1]
        method = parts[2] if len(parts) >= 3 else ""
        if method:
            return Selection(
                type=SelectionType.OPERATION, path=name, context={"method": method}
            )
        return Selection(type=SelectionType.PATH, path=name)

    if head == "components" and len(parts) >= 3 and parts[1] == "schemas":
        return Selection(
            type=SelectionType.SCHEMA, path=parts[2], context={"schemaName": parts[2]}
        )

    if head == "channels" and len(parts) >= 2:
        return Selection(type=SelectionType.CHANNEL, path=parts[1])

    return Selection(type=SelectionType.NONE, context={"rawPath": path})

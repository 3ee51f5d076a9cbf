"""specedit -- a structural editing engine for API specification documents.

This package loads OpenAPI 2.0/3.0/3.1 and AsyncAPI 2.x documents (JSON or
YAML) into a canonical in-memory tree, applies reversible edits through a
command history with undo/redo, projects the tree into a uniform navigation
outline, and maps validation problems onto editor selections.

Typical workflow::

    import asyncio
    from specedit.host import LocalHost
    from specedit.session import EditorSession
    from specedit.editing import edits

    session = EditorSession(LocalHost())
    asyncio.run(session.open("openapi.yaml"))
    session.execute(edits.set_info_field(session.document, "title", "Pets"))
    session.undo()

Modules:
    models: Pydantic models shared across the entire package.
    document: Parsing, serialisation, dialect detection and the state container.
    editing: Commands and the undo/redo history engine.
    navigation: Navigation tree builder.
    selection: Selection store and problem-path mapper.
    validation: Validation problem store.
    host: Host collaborator interface and the local implementation.
    session: Composition root wiring all of the above together.
    app: Typer application factory and CLI entry point.
"""

__version__ = "0.3.0"

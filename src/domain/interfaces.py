"""
Collaborator interfaces (Protocols).

Services depend on these rather than on a concrete provider so the engine
can be exercised without network access. The concrete adapter is wired at
construction time in ``src.services.container``.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class ContentGenerator(Protocol):
    """Produces draft text for AI reminders.

    Implementations raise ``GenerationFailure`` when no text can be produced.
    """

    async def generate(self, prompt: str) -> str: ...

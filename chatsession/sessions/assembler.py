from __future__ import annotations

from typing import Dict, List

from chatsession.models import Session


def assemble(session: Session, new_user_message: str) -> List[Dict[str, str]]:
    """
    Build the OpenAI-style message list for one turn:
    the system instruction, the prior history verbatim, then the new message.
    """
    messages: List[Dict[str, str]] = [
        {"role": "system", "content": session.system_prompt}
    ]
    messages.extend({"role": m.role, "content": m.content} for m in session.history)
    messages.append({"role": "user", "content": new_user_message})
    return messages


__all__ = ["assemble"]

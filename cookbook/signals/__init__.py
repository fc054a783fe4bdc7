"""
Cookbook Signals.

Sent by cookbook.service.Resource once the surrounding transaction commits,
so receivers never see rows that are later rolled back.

Signals:
    entry_saved: Entry created or edited
    entry_removed: Entry deleted
"""

from django.dispatch import Signal

# Entry created or edited
# Sent after Resource.add() / Resource.edit() commit
# Args: instance, created (bool)
entry_saved = Signal()

# Entry deleted
# Sent after Resource.remove() commits
# Args: instance (snapshot taken before relations were cleared)
entry_removed = Signal()

__all__ = ["entry_saved", "entry_removed"]

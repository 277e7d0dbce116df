"""Pub/sub topic names and their message data specifications.

Topics are declared up front from prototype listeners so that the first
message sent on a topic does not have to define its arguments.
"""

from pubsub import pub

COUNTER_STATE = "counter_state"
SESSIONS_CHANGED = "sessions_changed"
SESSION_LIFECYCLE = "session_lifecycle"


def _counter_state_proto(snapshot):
    """snapshot: CounterSnapshot after the change."""


def _sessions_changed_proto(logs):
    """logs: list of SessionLog in display order."""


def _session_lifecycle_proto(event):
    """event: SessionEvent describing the transition."""


def declare_topics() -> None:
    """Create all DigiCount topics in the default topic manager."""
    manager = pub.getDefaultTopicMgr()
    manager.getOrCreateTopic(COUNTER_STATE, _counter_state_proto)
    manager.getOrCreateTopic(SESSIONS_CHANGED, _sessions_changed_proto)
    manager.getOrCreateTopic(SESSION_LIFECYCLE, _session_lifecycle_proto)


declare_topics()

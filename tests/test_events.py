from utils.events import EventTracker, EventType


def test_record_notifies_only_matching_listeners():
    tracker = EventTracker()
    seen = []
    tracker.subscribe(EventType.EPISODE_COMPLETED, seen.append)

    tracker.record(0, EventType.TRAINING_STARTED, "go")
    event = tracker.record(0, EventType.EPISODE_COMPLETED, "score=2", {'score': 2})

    assert seen == [event]
    assert event.data == {'score': 2}


def test_trim_and_statistics():
    tracker = EventTracker(max_events=3)
    for episode in range(5):
        tracker.record(episode, EventType.EPISODE_COMPLETED, "")
    assert [e.episode for e in tracker.events] == [2, 3, 4]
    assert tracker.count_by_type(EventType.EPISODE_COMPLETED, since_episode=3) == 2
    stats = tracker.get_statistics()
    assert stats['EPISODE_COMPLETED'] == 3
    assert stats['TRAINING_PAUSED'] == 0


def test_unsubscribe_and_clear():
    tracker = EventTracker()
    seen = []
    tracker.subscribe(EventType.TRAINING_PAUSED, seen.append)
    assert tracker.unsubscribe(EventType.TRAINING_PAUSED, seen.append)
    assert not tracker.unsubscribe(EventType.TRAINING_PAUSED, seen.append)
    tracker.subscribe(EventType.TRAINING_STOPPED, seen.append)
    tracker.clear_listeners()
    tracker.record(1, EventType.TRAINING_STOPPED, "")
    assert seen == []
    assert tracker.listener_count() == 0

from spawngroups.priority import Priority


def test_default_is_medium():
    assert Priority.default() is Priority.MEDIUM


def test_background_is_lowest_value():
    assert Priority(0) is Priority.BACKGROUND
    assert min(Priority) is Priority(0)


def test_ordering_follows_declaration():
    declared = list(Priority)
    assert sorted(declared) == declared
    assert declared.index(Priority.default()) == 3
    assert max(declared) is Priority(5)


def test_sorting_mixed_priorities():
    mixed = [Priority.HIGH, Priority.default(), Priority(1), Priority.USERINITIATED, Priority(0)]
    assert sorted(mixed) == [
        Priority.BACKGROUND,
        Priority.LOW,
        Priority.MEDIUM,
        Priority.HIGH,
        Priority.USERINITIATED,
    ]


def test_round_trip_through_value():
    for priority in Priority:
        assert Priority(priority.value) is priority


def test_default_sits_between_utility_and_high():
    assert Priority.UTILITY < Priority.default() < Priority.HIGH
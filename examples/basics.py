from watchables import WatchableMap, WatchableSubject, partial_combine_watchable

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Defining a watchable")
print("-" * 100)
print()

# A subject is the mutable leaf. Watching it replays the current value right away.
current_name = WatchableSubject.of("Alice")

unsubscribe = current_name.watch(lambda name: print(f"Name is: {name}"))
current_name.update("Smith")  # Notifies
current_name.update("Smith")  # Same value, no notification

unsubscribe()
current_name.update("Bob")  # Nobody is watching anymore

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Deriving and combining")
print("-" * 100)
print()

current_age = WatchableSubject.empty()

# map() derives a new watchable. It stays empty while its source is empty.
greeting = current_name.map(lambda name: f"Hello, {name}!")
greeting.watch(print)

# Combining only includes the inputs that already have a value.
profile = partial_combine_watchable({"name": current_name, "age": current_age})
profile.watch(lambda value: print(f"Profile: {value}"))

current_age.update(31)
current_name.update("Charlie")

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Services expose read-only watchables")
print("-" * 100)
print()


class CounterService:
    def __init__(self):
        self._state = WatchableSubject.of(0)

    # Return the subject typed as a plain Watchable: readers can't update it.
    def value(self):
        return self._state

    def increment(self):
        self._state.update(self._state.get_value() + 1)


service = CounterService()
stop = service.value().map(lambda n: f"Counter value: {n}").watch(print)
service.increment()
service.increment()
stop()

# ------------------------------------------------------------------------------------------------

print()
print("=" * 100)
print("Keyed watchables")
print("-" * 100)
print()

# A WatchableMap lazily creates one leaf per key, e.g. contacts by email.
contacts = WatchableMap()
contacts.get_or_create("ada@example.com").watch(lambda name: print(f"Ada is now: {name}"))

contacts.update_or_create_with_value("ada@example.com", "Ada")
contacts.update_or_create_with_value("ada@example.com", "Ada")  # Equal, no notification
contacts.update_or_create("ada@example.com", lambda name=None: f"{name} Lovelace")

# snapshot() freezes the first value; later updates don't reach it.
frozen = contacts.get_or_create("ada@example.com").snapshot()
contacts.update_or_create_with_value("ada@example.com", "Countess of Lovelace")
print(f"Snapshot still says: {frozen.get_value()}")

#!/usr/bin/env python3
"""
Demonstration of vcoll's live views.
"""

from vcoll import Collection, ComparatorOrder, VirtualCollection


def show(label, view):
    print(f"{label:<12} {[r.get('title') for r in view]}")


def main():
    """Run demo of live view features."""

    print("Creating a reading list...\n")
    books = Collection([
        {"id": 1, "title": "Clean Code", "status": "reading", "rating": 4},
        {"id": 2, "title": "Design Patterns", "status": "unread", "rating": 5},
        {"id": 3, "title": "Python Tricks", "status": "read", "rating": 3},
    ])

    reading = VirtualCollection(books, filter={"status": "reading"}, name="reading")
    by_rating = VirtualCollection(
        books,
        ordering=ComparatorOrder(lambda a, b: b.get("rating") - a.get("rating")),
        name="by rating",
    )
    top_reading = VirtualCollection(reading, filter=lambda b: b.get("rating") >= 4, name="top reading")

    def report(name):
        return lambda event, *args: print(f"  [{name}] {event}")

    reading.on("all", report("reading"))
    top_reading.on("all", report("top reading"))

    show("reading", reading)
    show("by rating", by_rating)

    print("\nStart reading Design Patterns:")
    books.get(2).set(status="reading")
    show("reading", reading)
    show("top reading", top_reading)

    print("\nFinish Clean Code:")
    books.get(1).set(status="read")
    show("reading", reading)

    print("\nAdd a new book:")
    books.add({"id": 4, "title": "Fluent Python", "status": "reading", "rating": 5})
    show("reading", reading)
    show("by rating", by_rating)

    print("\nReplace everything:")
    books.reset([{"id": 5, "title": "SICP", "status": "reading", "rating": 5}])
    show("reading", reading)

    for view in (top_reading, reading, by_rating):
        view.stop_listening()


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
Demo script for the student notes state library
Walks one entry through create, update and delete using a memory store
"""

import json

from studentnotes.binding import new, version


def show(label, payload):
    data = json.loads(payload)
    print(f"\n{label}:")
    if not data["entries"]:
        print("   (no entries)")
    for entry in data["entries"]:
        tags = " ".join(f"#{t['id']}" for t in entry["tags"])
        print(f"   [{entry['id']}] color={entry['color']} {entry['text']} {tags}".rstrip())


def main():
    """Run a simple demo."""
    print(f"📝 Student Notes Demo (v{version()})")
    print("=" * 50)

    stater = new("memory", "demo")
    if stater is None:
        print("❌ Could not create a store")
        return

    try:
        created = json.loads(stater.entry_create("Buy milk #errand", 2))
        entry_id = created["entry"]["id"]
        show(f"✅ Created entry {entry_id}", stater.current())

        stater.entry_update(entry_id, "Buy milk and eggs #errand", 2)
        show("✏️  Updated", stater.current())

        show("🔍 Search 'egg'", stater.entry_search("egg"))

        stater.entry_delete(entry_id)
        show("🗑️  Deleted", stater.current())

        missing = stater.entry_delete(entry_id)
        print(f"\nDeleting again returns: {missing}")
    finally:
        stater.release()


if __name__ == "__main__":
    main()

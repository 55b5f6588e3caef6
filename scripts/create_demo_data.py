#!/usr/bin/env python3
"""
Create demo data for dashboard testing.
Only use this if you can't reach the timetable provider. The demo generation
replaces whatever the catalog currently holds.
"""

import random
import sys
from datetime import datetime, time, timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from timetable.config import CLUBS, Settings
from timetable.database.models import ClassSession, ClassType
from timetable.errors import StoreError
from timetable.factory import build_store

CLASS_TYPES = {
    'BODYPUMP': 'BODYPUMP™',
    'BODYCOMBAT': 'BODYCOMBAT™',
    'RPM': 'RPM™',
    'BODYBALANCE': 'BODYBALANCE™',
    'SPRINT': 'LES MILLS SPRINT™',
    'GRIT': 'LES MILLS GRIT™',
}


def create_demo_generation(settings: Settings, days: int = 14):
    """Random sessions across all clubs for the next `days` days."""
    tz = settings.reference_timezone
    today = datetime.now(tz).date()

    sessions = []
    counter = 1
    for offset in range(-1, days):
        day = today + timedelta(days=offset)
        for club in CLUBS.values():
            for _ in range(random.randint(6, 14)):
                code = random.choice(list(CLASS_TYPES))
                hour = random.randint(6, 20)
                start_at = datetime.combine(day, time(hour, random.choice([0, 15, 30, 45])), tzinfo=tz)
                duration = random.choice([30, 45, 55, 60])
                sessions.append(ClassSession(
                    id=f"demo-{counter:06d}",
                    name=CLASS_TYPES[code],
                    code=code,
                    club=club.code,
                    description=f"Demo {CLASS_TYPES[code]} class",
                    duration_minutes=duration,
                    start_at=start_at,
                    end_at=start_at + timedelta(minutes=duration),
                    is_virtual=random.random() < 0.15,
                ))
                counter += 1

    class_types = [ClassType(id=code, name=name) for code, name in CLASS_TYPES.items()]
    return sessions, class_types


def main():
    """Main function with command-line interface."""
    settings = Settings.from_env()

    if len(sys.argv) > 1 and sys.argv[1] == "clean":
        print("🧹 Emptying the catalog...")
        sessions, class_types = [], []
    else:
        print("🎭 Creating demo data for dashboard testing...")
        print("⚠️  This will replace the current catalog generation")
        response = input("Continue? (y/N): ").strip().lower()
        if response not in ['y', 'yes']:
            print("Cancelled.")
            return
        sessions, class_types = create_demo_generation(settings)

    try:
        store = build_store(settings)
        store.replace_catalog(sessions, class_types)
    except (RuntimeError, StoreError) as e:
        print(f"❌ Error writing demo data: {e}")
        sys.exit(1)

    print(f"✅ Installed {len(sessions)} classes and {len(class_types)} class types")
    if sessions:
        print("\n🚀 Demo data ready! You can now run the dashboard:")
        print("   python run_dashboard.py")


if __name__ == "__main__":
    main()

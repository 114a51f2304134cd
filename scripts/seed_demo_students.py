"""Seed random demo students through ``POST /students``.

Needs httpx, installed with the ``scripts`` extra: ``pip install -e .[scripts]``.
"""

import random

import httpx

API_URL = "http://localhost:8000"

MAJORS = [
    "Computer Science", "Psychology", "Biology", "Economics", "Business",
    "Engineering", "Physics", "Mathematics", "English", "Philosophy",
]

COURSES = [
    "CS101", "CS201", "MATH201", "MATH240", "PHYS101", "ECON110",
    "PSYC100", "BIOL112", "ENGL200", "PHIL210",
]

INTERESTS = ["AI", "Robotics", "Startups", "Music", "Film", "Photography", "Writing", "Chess"]
HOBBIES = ["Hiking", "Gaming", "Cooking", "Running", "Climbing", "Painting", "Reading"]
GOALS = ["Internship", "Research", "Grad School", "Study Group", "Make Friends"]

FIRST_NAMES = [
    "James", "Mary", "John", "Patricia", "Robert", "Jennifer", "Michael", "Linda",
    "William", "Elizabeth", "David", "Barbara", "Richard", "Susan", "Joseph", "Jessica",
]

LAST_NAMES = [
    "Smith", "Johnson", "Williams", "Brown", "Jones", "Garcia", "Miller", "Davis",
    "Rodriguez", "Martinez", "Wilson", "Anderson", "Taylor", "Moore", "Lee", "Clark",
]


def generate_random_student(index):
    return {
        "id": f"demo-{index:03d}",
        "name": f"{random.choice(FIRST_NAMES)} {random.choice(LAST_NAMES)}",
        "major": random.choice(MAJORS),
        "year": random.choice(["Freshman", "Sophomore", "Junior", "Senior"]),
        "courses": random.sample(COURSES, k=random.randint(1, 4)),
        "interests": random.sample(INTERESTS, k=random.randint(1, 5)),
        "hobbies": random.sample(HOBBIES, k=random.randint(1, 4)),
        "goals": random.sample(GOALS, k=random.randint(1, 3)),
    }


def main(count=25):
    with httpx.Client(base_url=API_URL, timeout=10.0) as client:
        for index in range(count):
            payload = generate_random_student(index)
            try:
                resp = client.post("/students", json=payload)
                resp.raise_for_status()
                print(f"Seeded {payload['id']} ({payload['name']})")
            except httpx.HTTPError as e:
                print(f"Failed seeding {payload['id']}: {e}")


if __name__ == "__main__":
    main()

# seed.py
"""Demo data set: the students, chats and library from the app mock-ups"""
from dataclasses import replace
from datetime import timedelta

from .clock import utcnow
from .library import ResourceMetadata
from .models.peers import Peer, University
from .stores import Stores

UNIVERSITIES = [
    University(id="ukzn", name="UKZN", full_name="University of KwaZulu-Natal", color="bg-red-600"),
    University(id="uct", name="UCT", full_name="University of Cape Town", color="bg-blue-700"),
    University(id="wits", name="Wits", full_name="University of the Witwatersrand", color="bg-yellow-600"),
    University(id="up", name="UP", full_name="University of Pretoria", color="bg-blue-900"),
    University(id="uj", name="UJ", full_name="University of Johannesburg", color="bg-orange-600"),
]

PEERS = [
    Peer(id="thabo", display_name="Thabo Nkosi", university_id="ukzn", course="Computer Science",
         year_of_study="3rd Year", avatar_color="bg-blue-600"),
    Peer(id="nomsa", display_name="Nomsa Dlamini", university_id="ukzn", course="Mathematics",
         year_of_study="3rd Year", avatar_color="bg-blue-400",
         bio="Math major who loves calculus and statistics. Always down for a study session at the library!",
         email="nomsa.d@student.university.ac.za"),
    Peer(id="khotso", display_name="Khotso Mokoena", university_id="ukzn", course="Computer Science",
         year_of_study="2nd Year", avatar_color="bg-pink-400",
         bio="Coding is life. Currently struggling with Algorithms. Let's pair program!",
         email="khotso.m@student.university.ac.za"),
    Peer(id="sipho", display_name="Sipho Zulu", university_id="ukzn", course="Comp Sci",
         year_of_study="3rd Year", avatar_color="bg-green-400", bio="Looking for study buddy"),
    Peer(id="thando", display_name="Thando Z.", university_id="ukzn", course="Mathematics",
         year_of_study="1st Year", bio="Need help with Calc"),
    Peer(id="kyle", display_name="Kyle V.", university_id="uct", course="Economics",
         year_of_study="2nd Year", bio="Exam prep group?"),
    Peer(id="lerato", display_name="Lerato K.", university_id="wits", course="Physics",
         year_of_study="Honours", bio="Available to tutor"),
    Peer(id="jason", display_name="Jason D.", university_id="up", course="Informatics",
         year_of_study="1st Year", bio="Study Group A"),
]

CHATS = {
    ("thabo", "khotso"): [
        ("thabo", "Yo, are you done with the CS assignment?"),
        ("khotso", "Yeah just submitted it now."),
        ("khotso", "Thanks man, really appreciate the help!"),
    ],
    ("thabo", "nomsa"): [
        ("nomsa", "Hey Thabo! Are you coming online for the study group session later?"),
        ("thabo", "Yes! I'll be there."),
        ("nomsa", "Did you get the answer for Q3?"),
    ],
}

GROUP_CHAT = [
    ("sipho", "Guys, are we meeting at the library or online?"),
    ("nomsa", "I think online is better today."),
    ("thabo", "Cool. I'll bring the past papers."),
]

RESOURCES = [
    ("Calculus 101 Finals", "Mathematics", "PDF", 2_516_582, None),
    ("Data Structures Notes", "Comp. Sci", "DOC", 1_153_434, None),
    ("Physics Lab Results", "Physics", "XLS", 819_200, 90),
    ("Linear Algebra Intro", "Mathematics", "PDF", 3_355_443, None),
    ("React.js Crash Course", "Comp. Sci", "PDF", 5_767_168, None),
]


async def seed_demo_data(stores: Stores, owner_id: str = "thabo"):
    for university in UNIVERSITIES:
        await stores.peers.upsert_university(replace(university))
    for peer in PEERS:
        await stores.peers.upsert_peer(replace(peer))
    await stores.peers.set_online("nomsa", True)

    # group first so the direct chats are the most recent
    group = await stores.conversations.create_conversation(
        [owner_id, "nomsa", "khotso", "sipho"],
        title="Study Group A",
        description="Official study group for Calculus 101. We meet every Tuesday and Thursday at the main library.",
        created_by=owner_id,
    )
    for sender, body in GROUP_CHAT:
        await stores.conversations.append_message(group.id, sender, body)

    for (a, b), lines in CHATS.items():
        conv = await stores.conversations.open_direct(a, b)
        for sender, body in lines:
            await stores.conversations.append_message(conv.id, sender, body)

    now = utcnow()
    for title, subject, file_type, size, ttl_days in RESOURCES:
        expires_at = now + timedelta(days=ttl_days) if ttl_days else None
        await stores.library.upload(
            ResourceMetadata(title=title, subject=subject, file_type=file_type, size=size, expires_at=expires_at),
            owner_id,
        )

from typing import Iterable, Tuple

from sqlalchemy.orm import Session

from review_api.core.security import PasswordHasher, default_hasher
from review_api.db.models import Item, User, new_id

DEMO_USERS = [
	("AstroNomad", "Galaxy*123"),
	("QuantumLeap", "Quark*789"),
	("CosmicRay", "Nebula*456"),
	("StarGazer", "Orion*234"),
	("NovaPioneer", "Nova*321"),
	("MoonWalker", "Crater*654"),
	("SolarSailor", "Sail*987"),
	("GalaxyGuard", "Guardian*852"),
	("MeteorSeeker", "Meteor*963"),
	("CometChaser", "Comet*741"),
]

DEMO_ITEMS = [
	"StarTracker",
	"NebulaNavigator",
	"QuantumCompass",
	"GalacticLens",
	"AstroScope",
	"CosmoMeter",
	"OrbitOval",
	"VortexViewer",
	"SolarScope",
	"PhotonFinder",
]


def seed_users(db: Session, users: Iterable[Tuple[str, str]], hasher: PasswordHasher = default_hasher) -> int:
	existing = {row.username for row in db.query(User.username).all()}
	count = 0
	for username, password in users:
		if username in existing:
			continue
		db.add(User(id=new_id(), username=username, password_hash=hasher.hash(password)))
		count += 1
	if count:
		db.commit()
	return count


def seed_items(db: Session, names: Iterable[str]) -> int:
	existing = {row.name for row in db.query(Item.name).all()}
	count = 0
	for name in names:
		if name in existing:
			continue
		db.add(Item(id=new_id(), name=name))
		count += 1
	if count:
		db.commit()
	return count


def seed_demo_data(session_factory, hasher: PasswordHasher = default_hasher) -> Tuple[int, int]:
	db = session_factory()
	try:
		users = seed_users(db, DEMO_USERS, hasher)
		items = seed_items(db, DEMO_ITEMS)
	finally:
		db.close()
	return users, items

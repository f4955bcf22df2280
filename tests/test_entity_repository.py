import threading

import pytest

from review_api.core.config import Settings
from review_api.core.errors import (
	DuplicateFavorite,
	DuplicateName,
	DuplicateReview,
	ForeignKeyViolation,
	ValidationError,
)
from review_api.db.base import Base
from review_api.db.models import Comment, Review
from review_api.db.session import build_engine, build_session_factory
from review_api.services.credential_store import CredentialStore
from review_api.services.entity_repository import EntityRepository


@pytest.fixture()
def alice(store):
	return store.create_user("alice", "pw1")


@pytest.fixture()
def bob(store):
	return store.create_user("bob", "pw2")


@pytest.fixture()
def widget(repo):
	return repo.create_item("Widget", "A widget", "tools")


def test_create_item(repo):
	item = repo.create_item("Widget")

	assert item.id
	assert item.description is None
	assert repo.get_item(item.id).name == "Widget"


def test_duplicate_item_name(repo, widget):
	with pytest.raises(DuplicateName):
		repo.create_item("Widget", "another")

	assert [i.name for i in repo.list_items()] == ["Widget"]


def test_blank_item_name(repo):
	with pytest.raises(ValidationError):
		repo.create_item("  ")


def test_duplicate_review_keeps_first(repo, alice, widget):
	first = repo.create_review(alice.id, widget.id, 5, "great")

	with pytest.raises(DuplicateReview):
		repo.create_review(alice.id, widget.id, 1, "bad")

	assert repo.get_review(first.id).rating == 5
	assert len(repo.list_reviews_by_user(alice.id)) == 1


def test_review_for_missing_item(repo, db, alice):
	with pytest.raises(ForeignKeyViolation) as exc:
		repo.create_review(alice.id, "no-such-item", 4, "hm")

	assert exc.value.message == "Referenced item or user not found"
	assert db.query(Review).count() == 0


def test_review_by_missing_user(repo, db, widget):
	with pytest.raises(ForeignKeyViolation) as exc:
		repo.create_review("no-such-user", widget.id, 4, "hm")

	assert exc.value.message == "Referenced item or user not found"
	assert db.query(Review).count() == 0


@pytest.mark.parametrize("rating", [0, 6, "5", 4.5, True])
def test_review_rating_validated(repo, alice, widget, rating):
	with pytest.raises(ValidationError):
		repo.create_review(alice.id, widget.id, rating, "x")


def test_fetch_item_reviews_includes_username_only(repo, alice, bob, widget):
	repo.create_review(alice.id, widget.id, 5, "great")
	repo.create_review(bob.id, widget.id, 3, "ok")

	rows = repo.fetch_item_reviews(widget.id)

	assert sorted(r["username"] for r in rows) == ["alice", "bob"]
	assert all("password_hash" not in r for r in rows)


def test_owner_can_update_review(repo, alice, widget):
	review = repo.create_review(alice.id, widget.id, 5, "great")

	updated = repo.update_review(review.id, alice.id, rating=4)

	assert updated.rating == 4
	assert updated.review_text == "great"


def test_non_owner_update_changes_nothing(repo, alice, bob, widget):
	review = repo.create_review(alice.id, widget.id, 5, "great")

	assert repo.update_review(review.id, bob.id, rating=1, review_text="hacked") is None

	current = repo.get_review(review.id)
	assert (current.rating, current.review_text) == (5, "great")


def test_update_missing_review(repo, alice):
	assert repo.update_review("no-such-review", alice.id, rating=3) is None


def test_update_requires_a_field(repo, alice, widget):
	review = repo.create_review(alice.id, widget.id, 5, "great")

	with pytest.raises(ValidationError):
		repo.update_review(review.id, alice.id)


def test_non_owner_delete_changes_nothing(repo, alice, bob, widget):
	review = repo.create_review(alice.id, widget.id, 5, "great")

	assert repo.delete_review(review.id, bob.id) is False
	assert repo.get_review(review.id) is not None


def test_delete_review_removes_its_comments(repo, db, alice, bob, widget):
	review = repo.create_review(alice.id, widget.id, 5, "great")
	repo.create_comment(bob.id, review.id, "agreed")
	repo.create_comment(alice.id, review.id, "thanks")

	assert repo.delete_review(review.id, alice.id) is True

	assert repo.get_review(review.id) is None
	assert db.query(Comment).filter(Comment.review_id == review.id).count() == 0


def test_comment_on_missing_review(repo, db, alice):
	with pytest.raises(ForeignKeyViolation):
		repo.create_comment(alice.id, "no-such-review", "hello")

	assert db.query(Comment).count() == 0


def test_comment_ownership(repo, alice, bob, widget):
	review = repo.create_review(alice.id, widget.id, 5, "great")
	comment = repo.create_comment(bob.id, review.id, "agreed")

	assert repo.update_comment(comment.id, alice.id, "edited by alice") is None
	assert repo.delete_comment(comment.id, alice.id) is False
	assert repo.get_comment(comment.id).comment_text == "agreed"

	assert repo.update_comment(comment.id, bob.id, "strongly agreed").comment_text == "strongly agreed"
	assert [c.id for c in repo.list_comments_by_user(bob.id)] == [comment.id]
	assert [c.id for c in repo.list_review_comments(review.id)] == [comment.id]
	assert repo.delete_comment(comment.id, bob.id) is True
	assert repo.get_comment(comment.id) is None


def test_favorites(repo, alice, bob, widget):
	favorite = repo.create_favorite(alice.id, widget.id)

	with pytest.raises(DuplicateFavorite):
		repo.create_favorite(alice.id, widget.id)
	repo.create_favorite(bob.id, widget.id)

	mine = repo.list_favorites(alice.id)
	assert [(f.id, f.item_name) for f in mine] == [(favorite.id, "Widget")]

	assert repo.delete_favorite(favorite.id, bob.id) is False
	assert repo.delete_favorite(favorite.id, alice.id) is True
	assert repo.list_favorites(alice.id) == []


def test_favorite_for_missing_item(repo, alice):
	with pytest.raises(ForeignKeyViolation):
		repo.create_favorite(alice.id, "no-such-item")


def test_concurrent_duplicate_reviews_resolve_to_one(tmp_path):
	settings = Settings(DATABASE_URL=f"sqlite:///{tmp_path / 'race.db'}", DB_TIMEOUT_SEC=10)
	engine = build_engine(settings)
	Base.metadata.create_all(bind=engine)
	session_factory = build_session_factory(engine)

	setup = session_factory()
	user = CredentialStore(setup).create_user("alice", "pw1")
	item = EntityRepository(setup).create_item("Widget")
	user_id, item_id = user.id, item.id
	setup.close()

	barrier = threading.Barrier(2)
	outcomes = []
	lock = threading.Lock()

	def attempt(rating):
		session = session_factory()
		try:
			barrier.wait()
			try:
				EntityRepository(session).create_review(user_id, item_id, rating, "race")
				result = "ok"
			except DuplicateReview:
				result = "duplicate"
		finally:
			session.close()
		with lock:
			outcomes.append(result)

	threads = [threading.Thread(target=attempt, args=(r,)) for r in (5, 1)]
	for t in threads:
		t.start()
	for t in threads:
		t.join()

	assert sorted(outcomes) == ["duplicate", "ok"]
	check = session_factory()
	try:
		assert check.query(Review).count() == 1
	finally:
		check.close()
		engine.dispose()

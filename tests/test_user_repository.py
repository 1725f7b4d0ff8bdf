"""Tests for UserRepository."""

import pytest

from userhub.constants import Role
from userhub.models import User
from userhub.services.repositories import DuplicateError, NotFoundError, UserRepository


def _user(email: str = "new@example.com", name: str = "New User") -> User:
    return User(name=name, email=email, password="$2b$04$hash")


class TestUserRepository:
    """Test cases for UserRepository."""

    def test_register_assigns_id_and_defaults(self, db):
        repo = UserRepository(db)
        user = repo.register(_user())
        db.commit()

        assert len(user.id) == 36
        assert user.role is Role.USER
        assert user.is_verified is False

    def test_register_duplicate_email_raises(self, db, test_user):
        repo = UserRepository(db)
        with pytest.raises(DuplicateError):
            repo.register(_user(email=test_user.email))

    def test_find_by_id_returns_user(self, db, test_user):
        """Should return user when ID exists."""
        repo = UserRepository(db)
        user = repo.find_by_id(test_user.id)
        assert user is not None
        assert user.id == test_user.id

    def test_find_by_id_returns_none_for_missing(self, db):
        """Should return None when ID does not exist."""
        repo = UserRepository(db)
        assert repo.find_by_id("nonexistent-uuid-12345") is None

    def test_get_by_id_raises_for_missing(self, db):
        repo = UserRepository(db)
        with pytest.raises(NotFoundError):
            repo.get_by_id("nonexistent-uuid-12345")

    def test_get_by_email_returns_user(self, db, test_user):
        repo = UserRepository(db)
        assert repo.get_by_email("test@example.com").id == test_user.id

    def test_get_by_email_raises_for_missing(self, db):
        repo = UserRepository(db)
        with pytest.raises(NotFoundError):
            repo.get_by_email("nonexistent@example.com")

    def test_check_email(self, db, test_user):
        repo = UserRepository(db)

        user, exists = repo.check_email("test@example.com")
        assert exists is True
        assert user.id == test_user.id

        assert repo.check_email("other@example.com") == (None, False)

    def test_update_skips_none_fields(self, db, test_user):
        repo = UserRepository(db)
        user = repo.update(test_user.id, name="Renamed", phone_number=None)
        db.commit()

        assert user.name == "Renamed"
        assert user.email == "test@example.com"

    def test_update_to_taken_email_raises(self, db, test_user, make_user):
        other = make_user(email="other@example.com")
        repo = UserRepository(db)
        with pytest.raises(DuplicateError):
            repo.update(other.id, email=test_user.email)

    def test_role_is_validated_on_assignment(self, test_user):
        with pytest.raises(ValueError):
            test_user.role = "superuser"

    def test_role_string_is_coerced(self, test_user):
        test_user.role = "admin"
        assert test_user.role is Role.ADMIN


class TestSoftDelete:
    def test_deleted_user_is_invisible(self, db, test_user):
        repo = UserRepository(db)
        repo.delete(test_user.id)
        db.commit()

        assert repo.find_by_id(test_user.id) is None
        assert repo.find_by_email(test_user.email) is None
        assert repo.check_email(test_user.email) == (None, False)
        assert repo.count() == 0

    def test_deleted_row_is_kept(self, db, test_user):
        UserRepository(db).delete(test_user.id)
        db.commit()

        row = db.get(User, test_user.id)
        assert row is not None
        assert row.is_deleted

    def test_deleted_email_can_register_again(self, db, test_user):
        repo = UserRepository(db)
        repo.delete(test_user.id)
        db.commit()

        again = repo.register(_user(email=test_user.email))
        db.commit()
        assert again.id != test_user.id

    def test_delete_missing_raises(self, db):
        with pytest.raises(NotFoundError):
            UserRepository(db).delete("nonexistent-uuid-12345")


class TestPagination:
    @pytest.fixture
    def users(self, make_user):
        names = ["Alice", "alice cooper", "Bob", "Carol", "Alicia"]
        return [make_user(email=f"user{i}@example.com", name=n) for i, n in enumerate(names)]

    def test_defaults(self, db, users):
        page = UserRepository(db).get_all_with_pagination()

        assert page.page == 1
        assert page.per_page == 10
        assert page.count == 5
        assert page.max_page == 1
        assert len(page.items) == 5

    def test_pages_do_not_overlap(self, db, users):
        repo = UserRepository(db)
        first = repo.get_all_with_pagination(page=1, per_page=2)
        second = repo.get_all_with_pagination(page=2, per_page=2)
        third = repo.get_all_with_pagination(page=3, per_page=2)

        ids = [u.id for p in (first, second, third) for u in p.items]
        assert len(ids) == 5
        assert len(set(ids)) == 5
        assert first.max_page == 3

    def test_page_past_the_end_is_empty(self, db, users):
        page = UserRepository(db).get_all_with_pagination(page=9, per_page=2)
        assert page.items == []
        assert page.count == 5

    def test_search_is_case_sensitive_substring(self, db, users):
        page = UserRepository(db).get_all_with_pagination(search="Ali")
        assert sorted(u.name for u in page.items) == ["Alice", "Alicia"]
        assert page.count == 2

    def test_search_excludes_deleted(self, db, users):
        repo = UserRepository(db)
        repo.delete(users[0].id)
        db.commit()

        page = repo.get_all_with_pagination(search="Ali")
        assert [u.name for u in page.items] == ["Alicia"]

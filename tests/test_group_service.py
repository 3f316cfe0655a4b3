import uuid
from datetime import timedelta

import pytest

from app.core.errors import (
    AlreadyMember, CannotRemoveSelf, ErrorKind, GroupNotFound, InvalidRole, MemberNotFound,
    InvalidUserId, NameRequired, NotAdmin, NotMember, StoreError, UserIdRequired, UserNotFound
)
from app.modules.groups.schemas import GroupCreate, MemberAdd, ROLE_ADMIN, ROLE_MEMBER
from tests.fakes import store_failure


class TestCreateGroup:
    def test_creator_becomes_admin(self, group_service, alice):
        group = group_service.create_group(GroupCreate(name="X"), alice.id)

        assert group_service.is_member(group.id, alice.id)
        assert group_service.get_membership(group.id, alice.id).role == ROLE_ADMIN
        assert group.created_by == alice.id

    @pytest.mark.parametrize("name", ["", "   "])
    def test_name_required(self, group_service, group_repo, alice, name):
        with pytest.raises(NameRequired):
            group_service.create_group(GroupCreate(name=name), alice.id)

        assert group_repo.groups == {}

    def test_rolls_back_group_when_membership_insert_fails(self, group_service, group_repo, alice):
        group_repo.fail_on["add_member"] = store_failure()

        with pytest.raises(StoreError):
            group_service.create_group(GroupCreate(name="X"), alice.id)

        assert group_repo.groups == {}
        assert len(group_repo.calls("delete")) == 1

    def test_rollback_failure_keeps_original_error(self, group_service, group_repo, alice):
        membership_error = store_failure()
        group_repo.fail_on["add_member"] = membership_error
        group_repo.fail_on["delete"] = RuntimeError("delete failed too")

        with pytest.raises(Exception) as exc_info:
            group_service.create_group(GroupCreate(name="X"), alice.id)

        assert exc_info.value is membership_error


class TestMembership:
    def test_non_member(self, group_service, group, bob):
        assert group_service.is_member(group.id, bob.id) is False
        with pytest.raises(NotMember):
            group_service.get_membership(group.id, bob.id)

    def test_is_member_propagates_store_failure(self, group_service, group_repo, group, alice):
        group_repo.fail_on["get_membership"] = store_failure()

        with pytest.raises(Exception) as exc_info:
            group_service.is_member(group.id, alice.id)

        assert exc_info.value.kind == ErrorKind.UPSTREAM_FAILURE

    def test_get_group_requires_membership(self, group_service, group, alice, bob):
        assert group_service.get_group(group.id, alice.id).name == "Engineering"
        with pytest.raises(NotMember):
            group_service.get_group(group.id, bob.id)

    def test_list_members_ordered_by_join_time(self, group_service, group, alice, bob, make_user):
        carol = make_user("carol@example.com")
        group_service.add_member(group.id, MemberAdd(user_id=bob.id), alice.id)
        group_service.add_member(group.id, MemberAdd(user_id=carol.id), alice.id)

        members = group_service.list_members(group.id, bob.id)

        assert [m.user_id for m in members] == [alice.id, bob.id, carol.id]

    def test_list_by_user_newest_first(self, group_service, group_repo, alice):
        first = group_service.create_group(GroupCreate(name="first"), alice.id)
        second = group_service.create_group(GroupCreate(name="second"), alice.id)
        group_repo.groups[first.id] = first.model_copy(update={"created_at": first.created_at - timedelta(seconds=1)})

        assert [g.id for g in group_service.list_by_user(alice.id)] == [second.id, first.id]
        assert set(group_service.get_user_group_ids(alice.id)) == {first.id, second.id}


class TestAddMember:
    def test_defaults_to_member(self, group_service, group, alice, bob):
        membership = group_service.add_member(group.id, MemberAdd(user_id=bob.id), alice.id)

        assert membership.role == ROLE_MEMBER
        assert group_service.is_member(group.id, bob.id)

    def test_admin_role(self, group_service, group, alice, bob):
        group_service.add_member(group.id, MemberAdd(user_id=bob.id, role="admin"), alice.id)

        assert group_service.get_membership(group.id, bob.id).is_admin

    def test_non_admin_cannot_add(self, group_service, group_repo, group, alice, bob, make_user):
        carol = make_user("carol@example.com")
        group_service.add_member(group.id, MemberAdd(user_id=bob.id), alice.id)
        before = len(group_repo.memberships)

        with pytest.raises(NotAdmin):
            group_service.add_member(group.id, MemberAdd(user_id=carol.id), bob.id)

        assert len(group_repo.memberships) == before

    def test_non_member_cannot_add(self, group_service, group, bob, make_user):
        carol = make_user("carol@example.com")

        with pytest.raises(NotAdmin):
            group_service.add_member(group.id, MemberAdd(user_id=carol.id), bob.id)

    def test_duplicate(self, group_service, group, alice, bob):
        group_service.add_member(group.id, MemberAdd(user_id=bob.id), alice.id)

        with pytest.raises(AlreadyMember):
            group_service.add_member(group.id, MemberAdd(user_id=bob.id), alice.id)

    def test_unknown_user(self, group_service, group, alice):
        with pytest.raises(UserNotFound):
            group_service.add_member(group.id, MemberAdd(user_id=str(uuid.uuid4())), alice.id)

    @pytest.mark.parametrize("member_data, error", [
        (MemberAdd(user_id=""), UserIdRequired),
        (MemberAdd(user_id="not-a-uuid"), InvalidUserId),
        (MemberAdd(user_id=str(uuid.uuid4()), role="owner"), InvalidRole),
    ])
    def test_input_validated_before_authorization(self, group_service, group_repo, group, bob,
                                                  member_data, error):
        with pytest.raises(error):
            group_service.add_member(group.id, member_data, bob.id)

        assert group_repo.calls("get_membership") == []


class TestRemoveMember:
    def test_admin_removes_member(self, group_service, group, alice, bob):
        group_service.add_member(group.id, MemberAdd(user_id=bob.id), alice.id)

        group_service.remove_member(group.id, bob.id, alice.id)

        assert group_service.is_member(group.id, bob.id) is False

    @pytest.mark.parametrize("role", [ROLE_ADMIN, ROLE_MEMBER])
    def test_cannot_remove_self_regardless_of_role(self, group_service, group, alice, bob, role):
        group_service.add_member(group.id, MemberAdd(user_id=bob.id, role=role), alice.id)

        with pytest.raises(CannotRemoveSelf):
            group_service.remove_member(group.id, bob.id, bob.id)
        with pytest.raises(CannotRemoveSelf):
            group_service.remove_member(group.id, alice.id, alice.id)

    def test_non_admin_cannot_remove(self, group_service, group, alice, bob):
        group_service.add_member(group.id, MemberAdd(user_id=bob.id), alice.id)

        with pytest.raises(NotAdmin):
            group_service.remove_member(group.id, alice.id, bob.id)

    def test_missing_target(self, group_service, group, alice, bob):
        with pytest.raises(MemberNotFound) as exc_info:
            group_service.remove_member(group.id, bob.id, alice.id)

        assert isinstance(exc_info.value, NotMember)
        assert exc_info.value.kind == ErrorKind.NOT_FOUND


class TestDeleteGroup:
    def test_admin_deletes_group_and_memberships(self, group_service, group_repo, group, alice, bob):
        group_service.add_member(group.id, MemberAdd(user_id=bob.id), alice.id)

        group_service.delete_group(group.id, alice.id)

        assert group.id not in group_repo.groups
        assert group_service.get_user_group_ids(bob.id) == []

    def test_member_cannot_delete(self, group_service, group, alice, bob):
        group_service.add_member(group.id, MemberAdd(user_id=bob.id), alice.id)

        with pytest.raises(NotAdmin):
            group_service.delete_group(group.id, bob.id)

    def test_missing_group_on_store_delete(self, group_service, group_repo, group, alice):
        group_repo.fail_on["delete"] = GroupNotFound()

        with pytest.raises(GroupNotFound):
            group_service.delete_group(group.id, alice.id)

    def test_role_is_read_live(self, group_service, group_repo, group, alice, bob):
        group_service.add_member(group.id, MemberAdd(user_id=bob.id, role="admin"), alice.id)
        # Demote bob directly in the store
        key = (bob.id, group.id)
        group_repo.memberships[key] = group_repo.memberships[key].model_copy(update={"role": ROLE_MEMBER})

        with pytest.raises(NotAdmin):
            group_service.delete_group(group.id, bob.id)

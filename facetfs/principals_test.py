from facetfs.principals import GroupPrincipal, UserPrincipal, create_group_principal, create_user_principal


def test_principals() -> None:
    assert create_user_principal("alice") == UserPrincipal("alice")
    assert create_group_principal("staff") == GroupPrincipal("staff")
    assert str(GroupPrincipal("staff")) == "staff"
    # A group never equals the user of the same name.
    assert GroupPrincipal("x") != UserPrincipal("x")
    assert isinstance(GroupPrincipal("x"), UserPrincipal)
    assert len({UserPrincipal("x"), UserPrincipal("x"), GroupPrincipal("x")}) == 2

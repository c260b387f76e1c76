import enum


class Provider(str, enum.Enum):
    """Third-party identity providers players can sign in with.

    The set is closed: adding a provider means adding a member here and a
    migration extending the `third_party_provider` database enum.
    """

    GOOGLE = "Google"

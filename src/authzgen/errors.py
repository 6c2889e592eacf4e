class AuthzgenError(Exception):
    """Base class for every error a compilation run can raise.

    Catching this is enough to handle a failed run: scan and parse
    failures, model conflicts and template failures all derive from it.
    """

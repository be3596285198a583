"""
Exceptions raised while executing automation steps.
"""


class ActionError(Exception):
    """
    A step's action could not be carried out.

    The message is recorded on the step result and, when the failure is not
    handled by ``onFailure``, on the run itself.
    """


class UnsupportedActionError(ActionError):

    def __init__(self, action_type):
        self.action_type = action_type
        super().__init__(f"Unsupported action type: {action_type}")

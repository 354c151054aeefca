"""Account services: the credential workflow and its collaborators."""

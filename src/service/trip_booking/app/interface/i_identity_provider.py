from abc import ABC, abstractmethod


class IIdentityProvider(ABC):
    @abstractmethod
    async def get_user_attributes(self, *, user_pool_id: str, username: str) -> dict[str, str]:
        """
        Profile attributes of one user (name, email, phone_number); missing ones are absent.

        Raises:
            IdentityLookupFailedError
        """
        pass

from pydantic import BaseModel, ConfigDict, Field, field_validator


class User(BaseModel):
    """对外暴露的用户信息，不含密码哈希"""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
    username: str

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        # Mongo 中为 ObjectId
        return str(value)


class UserInDB(User):
    password_hash: str = Field(alias="passwordHash")

    def public(self) -> User:
        return User(id=self.id, username=self.username)

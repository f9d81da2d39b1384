from pydantic import BaseModel, field_validator


class QuizCreate(BaseModel):
    question: str
    answer: str

    @field_validator("question")
    @classmethod
    def question_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("The question must not be empty")
        return value

    @field_validator("answer")
    @classmethod
    def answer_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("The answer must not be empty")
        return value


class QuizRead(BaseModel):
    id: int
    question: str
    answer: str

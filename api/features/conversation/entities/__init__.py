from .task_conversation import MessageSender, MessageType, TaskConversation, TaskMessage

__all__ = ["MessageSender", "MessageType", "TaskConversation", "TaskMessage"]

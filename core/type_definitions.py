from typing import Dict, Optional, NamedTuple, Tuple, TypedDict
from enum import Enum

# ウィザードのステップ
# 各ステップはアプリケーションのUIとロジックのフローを示す
STEP_INTRO = "intro"                # 名前入力と説明
STEP_VALUES = "values"              # STEP 1: 価値観の質問
STEP_TALENTS = "talents"            # STEP 2: 才能の質問
STEP_PASSION = "passion"            # STEP 3: 情熱の質問
STEP_ANALYSIS = "analysis"          # AI分析中のオーバーレイ (滞留しない)
STEP_RESULT = "result"              # 分析結果の表示と保存
STEP_FIRST_ACTION = "first_action"  # 今日のファーストアクション入力 (first_action バリアント)
STEP_COMPLETE = "complete"          # 完了画面 (first_action バリアント)
STEP_CHOICE = "choice"              # 授業での関わり方の選択 (choice バリアント)

# 総合分析を StepAnalysis に記録するキー
FINAL_ANALYSIS_KEY = "final"


class SupportChoice(Enum):
    """
    結果画面の後に生徒が選ぶ、今後の関わり方。
    WITH_TEACHER: 先生と一緒に取り組む
    ON_MY_OWN: 一人で進める（困ったら声かけてね）
    """
    WITH_TEACHER = "サポートしてほしい"
    ON_MY_OWN = "自分でやってみる"

    def __str__(self):
        return self.value

    @property
    def wants_support(self) -> bool:
        return self is SupportChoice.WITH_TEACHER

    @classmethod
    def from_wants_support(cls, wants_support: bool) -> "SupportChoice":
        return cls.WITH_TEACHER if wants_support else cls.ON_MY_OWN


class Question(NamedTuple):
    """
    質問カタログの1項目。起動時に定義され、変更されない。

    Attributes:
        id (str): カタログ内で一意なID (v1, t1, p1 ...)
        step (str): 所属するステップ
        question (str): 質問文
        placeholder (Optional[str]): 入力欄のヒント
        sub_questions (Tuple[str, ...]): 考えるきっかけになる補助質問
    """
    id: str
    step: str
    question: str
    placeholder: Optional[str] = None
    sub_questions: Tuple[str, ...] = ()


class Answer(NamedTuple):
    """生徒の回答。空文字は未回答を表す。"""
    question_id: str
    answer: str


class AnswerWithQuestion(TypedDict):
    """分析リクエストに渡す、質問文付きの回答。"""
    question_id: str
    question: str
    answer: str


class StepAnalysis(TypedDict, total=False):
    """
    ステップごとの分析テキスト。未実施のステップはキー自体が存在しない。

    Attributes:
        values (str): 価値観の分析
        talents (str): 才能の分析
        passion (str): 情熱の分析
        final (str): 総合分析 (画像プロンプトを含む生テキスト)
    """
    values: str
    talents: str
    passion: str
    final: str


class SessionState(TypedDict):
    """
    1回の自己分析ワークのセッション状態。遷移ごとに新しい辞書として作り直す。

    Attributes:
        student_name (str): 生徒の名前 (introを抜けるには空でないこと)
        current_step (str): 現在のステップ
        answers (Tuple[Answer, ...]): 提出順の回答
        step_analysis (StepAnalysis): ステップごとの分析テキスト
        generated_image (Optional[str]): 生成されたビジョン画像のURL
        first_action (Optional[str]): 今日のファーストアクション
        wants_support (Optional[bool]): サポート希望 (未選択はNone)
        notification_sent (bool): 先生への通知が完了したか
        error_message (Optional[str]): UIに表示するエラーメッセージ
        notice_message (Optional[str]): UIに表示する成功メッセージ
    """
    student_name: str
    current_step: str
    answers: Tuple[Answer, ...]
    step_analysis: StepAnalysis
    generated_image: Optional[str]
    first_action: Optional[str]
    wants_support: Optional[bool]
    notification_sent: bool
    error_message: Optional[str]
    notice_message: Optional[str]


class AnalysisBundle(TypedDict, total=False):
    """保存・メール送信に渡す分析結果一式。"""
    values: str
    talents: str
    passion: str
    final: str


AnswerInputs = Dict[str, str]
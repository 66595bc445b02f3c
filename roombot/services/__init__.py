# roombot/services/__init__.py
# ワークフローのコア。各モジュールは Session を受け取り Result / Decision を返す。

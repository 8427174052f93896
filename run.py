from spread_pickem import create_app, db
from spread_pickem.models import Game, LeaderboardEntry, Participant, Pick

app = create_app()


@app.shell_context_processor
def make_shell_context():
    return {
        "db": db,
        "Participant": Participant,
        "Game": Game,
        "Pick": Pick,
        "LeaderboardEntry": LeaderboardEntry,
    }


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=True)
